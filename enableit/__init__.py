"""Host-side building blocks for assistive-device firmware: HDLC framing, RTP packets, a byte buffer, FFTs, QR codes, EMG filters, an AES block cipher, console routing, message dispatch and system info."""

__version__ = "0.1.0"

__all__ = [
    "circular_buffer",
    "cipher",
    "console",
    "emg_filter",
    "fft",
    "hdlc",
    "hdlc_frame",
    "protocol_processor",
    "qrcode",
    "qrencode",
    "rtp",
    "system_info",
]