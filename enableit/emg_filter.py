"""Digital filter chain for surface EMG signals.

The chain is a DC offset filter, a mains hum notch (50 Hz or 60 Hz), a
low-pass filter and a 20 Hz high-pass filter. Each stage can be turned on
or off. Only 500 Hz and 1000 Hz sample rates are supported; any other
sample rate or hum frequency puts the chain in bypass.
"""

from __future__ import annotations

import enum

Coefficients = tuple[tuple[float, ...], tuple[float, ...]]


class SampleFrequency(enum.IntEnum):
    """Supported sample rates, in Hz."""

    HZ_500 = 500
    HZ_1000 = 1000


class NotchFrequency(enum.IntEnum):
    """Mains hum frequencies the notch stage removes, in Hz."""

    HZ_50 = 50
    HZ_60 = 60


class FilterType(enum.Enum):
    """Kind of second-order stage."""

    LOWPASS = enum.auto()
    HIGHPASS = enum.auto()
    DC_OFFSET = enum.auto()


# (numerator, denominator) for each second-order stage. The low-pass stage
# runs at a 300 Hz cutoff for 500 Hz sampling and 150 Hz for 1000 Hz.
_SECOND_ORDER: dict[tuple[FilterType, SampleFrequency], Coefficients] = {
    (FilterType.DC_OFFSET, SampleFrequency.HZ_500): (
        (0.9990, -1.9980, 0.9990),
        (1.0000, -1.9980, 0.9980),
    ),
    (FilterType.DC_OFFSET, SampleFrequency.HZ_1000): (
        (0.9995, -1.9990, 0.9995),
        (1.0000, -1.9990, 0.9990),
    ),
    (FilterType.LOWPASS, SampleFrequency.HZ_500): (
        (0.2066, 0.4131, 0.2066),
        (1.0000, -0.3695, 0.1958),
    ),
    (FilterType.LOWPASS, SampleFrequency.HZ_1000): (
        (0.1311, 0.2622, 0.1311),
        (1.0000, -0.7478, 0.2722),
    ),
    (FilterType.HIGHPASS, SampleFrequency.HZ_500): (
        (0.8371, -1.6742, 0.8371),
        (1.0000, -1.6475, 0.7009),
    ),
    (FilterType.HIGHPASS, SampleFrequency.HZ_1000): (
        (0.9150, -1.8299, 0.9150),
        (1.0000, -1.8227, 0.8372),
    ),
}

# (numerator, denominator, output gain) for the cascaded anti-hum stage.
_FOURTH_ORDER: dict[
    tuple[SampleFrequency, NotchFrequency], tuple[tuple[float, ...], tuple[float, ...], float]
] = {
    (SampleFrequency.HZ_500, NotchFrequency.HZ_50): (
        (0.9522, -1.5407, 0.9522, 0.8158, -0.8045, 0.0855),
        (1.0000, -1.5395, 0.9056, 1.0000, -1.1187, 0.3129),
        1.3422,
    ),
    (SampleFrequency.HZ_1000, NotchFrequency.HZ_50): (
        (0.5869, -1.1146, 0.5869, 1.0499, -2.0000, 1.0499),
        (1.0000, -1.8844, 0.9893, 1.0000, -1.8991, 0.9892),
        1.4399,
    ),
    (SampleFrequency.HZ_500, NotchFrequency.HZ_60): (
        (0.9528, -1.3891, 0.9528, 0.8272, -0.7225, 0.0264),
        (1.0000, -1.3880, 0.9066, 1.0000, -0.9739, 0.2371),
        1.3430,
    ),
    (SampleFrequency.HZ_1000, NotchFrequency.HZ_60): (
        (0.5824, -1.0810, 0.5824, 1.0736, -2.0000, 1.0736),
        (1.0000, -1.8407, 0.9894, 1.0000, -1.8584, 0.9891),
        1.4206,
    ),
}


class SecondOrderFilter:
    """Biquad stage in direct form II."""

    def __init__(self, filter_type: FilterType, sample_freq: int) -> None:
        self.filter_type = FilterType(filter_type)
        self.sample_freq = SampleFrequency(sample_freq)
        self.numerator, self.denominator = _SECOND_ORDER[(self.filter_type, self.sample_freq)]
        self._states = [0.0, 0.0]

    def reset(self) -> None:
        """Clear the filter memory."""
        self._states = [0.0, 0.0]

    def update(self, value: float) -> float:
        """Filter one sample."""
        num, den = self.numerator, self.denominator
        s0, s1 = self._states
        tmp = (value - den[1] * s0 - den[2] * s1) / den[0]
        output = num[0] * tmp + num[1] * s0 + num[2] * s1
        self._states = [tmp, s0]
        return output


class FourthOrderFilter:
    """Anti-hum stage: two cascaded biquads in transposed direct form II."""

    def __init__(self, sample_freq: int, hum_freq: int) -> None:
        self.sample_freq = SampleFrequency(sample_freq)
        self.hum_freq = NotchFrequency(hum_freq)
        self.numerator, self.denominator, self.gain = _FOURTH_ORDER[
            (self.sample_freq, self.hum_freq)
        ]
        self._states = [0.0, 0.0, 0.0, 0.0]

    def reset(self) -> None:
        """Clear the filter memory."""
        self._states = [0.0, 0.0, 0.0, 0.0]

    def update(self, value: float) -> float:
        """Filter one sample."""
        num, den, states = self.numerator, self.denominator, self._states

        stage_out = num[0] * value + states[0]
        states[0] = (num[1] * value + states[1]) - den[1] * stage_out
        states[1] = num[2] * value - den[2] * stage_out
        stage_in = stage_out
        stage_out = num[3] * stage_in + states[2]
        states[2] = (num[4] * stage_in + states[3]) - den[4] * stage_out
        states[3] = num[5] * stage_in - den[5] * stage_out

        return self.gain * stage_out


def _supported(enum_type: type[enum.IntEnum], value: int) -> bool:
    try:
        enum_type(value)
    except ValueError:
        return False
    return True


class EmgFilters:
    """The full EMG filter chain with per-stage switches."""

    def __init__(
        self,
        sample_freq: int,
        notch_freq: int,
        dc_offset: bool = True,
        notch: bool = True,
        lowpass: bool = True,
        highpass: bool = True,
    ) -> None:
        self.sample_freq = sample_freq
        self.notch_freq = notch_freq
        self.bypass = not (
            _supported(SampleFrequency, sample_freq) and _supported(NotchFrequency, notch_freq)
        )
        self.dc_offset_enabled = dc_offset
        self.notch_enabled = notch
        self.lowpass_enabled = lowpass
        self.highpass_enabled = highpass

        self._dcf: SecondOrderFilter | None = None
        self._lpf: SecondOrderFilter | None = None
        self._hpf: SecondOrderFilter | None = None
        self._ahf: FourthOrderFilter | None = None
        if not self.bypass:
            self._dcf = SecondOrderFilter(FilterType.DC_OFFSET, sample_freq)
            self._lpf = SecondOrderFilter(FilterType.LOWPASS, sample_freq)
            self._hpf = SecondOrderFilter(FilterType.HIGHPASS, sample_freq)
            self._ahf = FourthOrderFilter(sample_freq, notch_freq)

    def update(self, value: float) -> float:
        """Run one sample through the enabled stages.

        With the notch stage disabled the chain restarts from the raw input,
        discarding the DC offset stage's output.
        """
        if self.bypass:
            return value
        assert self._dcf and self._lpf and self._hpf and self._ahf

        output = self._dcf.update(value) if self.dc_offset_enabled else value
        output = self._ahf.update(output) if self.notch_enabled else value
        if self.lowpass_enabled:
            output = self._lpf.update(output)
        if self.highpass_enabled:
            output = self._hpf.update(output)
        return output