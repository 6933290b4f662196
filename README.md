# enableit

Small, self-contained building blocks for working on the host side with the
data that assistive-device firmware produces and expects.

| Module | What it provides |
| --- | --- |
| `enableit.hdlc_frame` | Byte-at-a-time framing with boundary markers, byte stuffing and an FCS-16 check: `HdlcFrame` (`produce`, `put`, `feed`, `consume`, `ready`), `encode_frame`, `fcs16`, `FrameMode`, `FrameState`. |
| `enableit.hdlc` | The text handshake that precedes framed traffic: `HdlcCommandMode` reads `ACK`, answers `SYN`, reads `ACK`, answers `RDY`, then waits for `GO `. |
| `enableit.rtp` | `RtpPacket`: a 12-byte RTP header with `version`, `cc`, `marker`, `payload_type`, `sequence`, `timestamp` and `ssrc` properties, `init`, `set_payload` and `to_bytes`. |
| `enableit.circular_buffer` | `CircularBuffer`: a thread-safe bounded byte FIFO; `produce` never blocks, `consume(size, timeout)` waits up to `timeout` milliseconds. |
| `enableit.fft` | Split-radix FFTs: `fft` and `ifft` on sequences of complex numbers, `rfft` and `irfft` on real samples with a packed spectrum layout, `twiddle_factors`, and `FftPlan` for a fixed size, `FftType` and `FftDirection`. Sizes must be powers of two. |
| `enableit.qrencode` | QR data encoding and Reed-Solomon error correction: `encode_data`, `mode_bits`, `data_capacity`, `rs_generator`, `rs_remainder`, `add_error_correction`, `BitBuffer`, `Mode`. |
| `enableit.qrcode` | `QrCode.from_text(version, ecc, text)` builds a full symbol with the lowest-penalty mask; `module(x, y)`, `to_text()`, `buffer_size`, `penalty_score`, `ErrorCorrection`. |
| `enableit.emg_filter` | `EmgFilters`: DC offset, 50/60 Hz notch, low-pass and 20 Hz high-pass stages for 500 Hz or 1000 Hz sampling; unsupported rates put the chain in bypass. Also `SecondOrderFilter` and `FourthOrderFilter`. |
| `enableit.cipher` | `Cipher`: AES-128 ECB in 16-byte blocks (`encrypt_block`, `decrypt_block`, `encrypt_buffer`, `decrypt_buffer`, `encrypt_string`, `decrypt_string`) and `normalize_key`. |
| `enableit.console` | `ConsoleWrapper` routes byte I/O to the highest-priority connected `ConsoleTransport`, falling back to a default transport; `format_message` handles `%s %d %i %u %x %f %%`. |
| `enableit.protocol_processor` | `ProtocolProcessor` dispatches `target:command` lines to `FeatureV1` objects and JSON messages (`v`, `type`, `target`, `action`) to `FeatureV2` objects. |
| `enableit.system_info` | `SystemInfoProvider` builds a JSON document from a `ChipInfo` and a device id, with custom sections that can be added, removed and cleared. |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Frame a payload and decode it again:

```python
from enableit.hdlc_frame import HdlcFrame, encode_frame

wire = encode_frame(b"hello")
receiver = HdlcFrame()
for byte in wire:
    receiver.feed(byte)
print(receiver.consume())  # b'hello'
```

Transform a signal and back:

```python
from enableit.fft import fft, ifft

spectrum = fft([1, 2, 3, 4, 0, 0, 0, 0])
samples = ifft(spectrum)  # the input again, as complex numbers
```

Render a QR code as text:

```python
from enableit.qrcode import ErrorCorrection, QrCode

code = QrCode.from_text(3, ErrorCorrection.LOW, "HELLO WORLD")
print(code.to_text())  # '#' for dark modules, '.' for light ones
```

Filter an EMG sample stream:

```python
from enableit.emg_filter import EmgFilters, NotchFrequency, SampleFrequency

filters = EmgFilters(SampleFrequency.HZ_1000, NotchFrequency.HZ_50)
cleaned = [filters.update(sample) for sample in (0.0, 1.0, 0.5, -0.25)]
```

Encrypt and decrypt text. A key of exactly 16 bytes is used as given, a
longer one is cut to 16 bytes and a shorter one is replaced by the built-in
default key, which `Cipher()` also uses:

```python
from enableit.cipher import Cipher

cipher = Cipher()
ciphertext = cipher.encrypt_string("message to protect")
print(cipher.decrypt_string(ciphertext))  # b'message to protect'
```

Dispatch a command to a feature:

```python
from enableit.protocol_processor import FeatureV1, ProtocolProcessor

class Shout(FeatureV1):
    def handle(self, command):
        return command.upper()

processor = ProtocolProcessor({"shout": Shout("shout")})
print(processor.process("shout:hi"))  # 'HI'
print(processor.process("nobody:hi"))  # "ERROR: Feature 'nobody' not found"
```

## What this package does not do

This is a library with no command-line program. It does not talk to
hardware: there is no Bluetooth server, Wi-Fi or telnet service, serial port,
motor or ADC driver, and no display drawing. `ConsoleWrapper` and
`HdlcCommandMode` work over transports you supply, `SystemInfoProvider` takes
the chip facts you pass in a `ChipInfo`, and `ProtocolProcessor` looks features
up in a mapping you provide.