from typing import Annotated, Literal

import numpy as np
import numpy.typing as npt
from annotated_types import Ge, Gt, Interval
from pydantic import Field

from mpfluor.schema._base_model import FrozenModel

PositiveFloat = Annotated[float, Gt(0)]
NonNegativeFloat = Annotated[float, Ge(0)]


class Photodiode(FrozenModel):
    """Photodiode with a transimpedance front end and an ADC.

    Attributes
    ----------
    detector_type : str
        Type of detector, for discriminated unions.
    responsivity : float
        Photodiode responsivity in A/W.
    dark_current : float
        Dark current in A.
    transimpedance_gain : float
        Front-end gain in Ω (V/A).
    bit_depth : int
        ADC bit depth.
    full_scale_voltage : float
        Voltage mapped to the highest ADC code.
    name : str
        A descriptive name for the detector.  Not used internally.
    """

    detector_type: Literal["photodiode"] = "photodiode"
    responsivity: PositiveFloat = Field(0.4, description="A/W")
    dark_current: NonNegativeFloat = Field(2e-9, description="A")
    transimpedance_gain: PositiveFloat = Field(1e6, description="Ω")
    bit_depth: Annotated[int, Interval(ge=1, le=32)] = 12
    full_scale_voltage: PositiveFloat = Field(5.0, description="V")
    name: str = ""

    @property
    def max_intensity(self) -> int:
        return int(2**self.bit_depth - 1)

    @property
    def dark_voltage(self) -> float:
        """Dark current as seen at the transimpedance output (V)."""
        return self.dark_current * self.transimpedance_gain

    @property
    def lsb_voltage(self) -> float:
        """Voltage step of one ADC code."""
        return self.full_scale_voltage / self.max_intensity

    def current_to_voltage(self, current: "npt.ArrayLike") -> npt.NDArray:
        return np.asarray(current, dtype=float) * self.transimpedance_gain

    def digitize(self, voltage: "float | npt.ArrayLike") -> "int | npt.NDArray":
        """Clip `voltage` to the ADC range and quantize it to an integer code.

        Rounds half up, so ``full_scale_voltage / 2`` lands on the upper code.
        NaN reads as 0 V.
        Scalars return a python int, arrays an integer array.
        """
        volts = np.nan_to_num(np.asarray(voltage, dtype=float), nan=0.0)
        clipped = np.clip(volts, 0, self.full_scale_voltage)
        codes = np.floor(clipped / self.full_scale_voltage * self.max_intensity + 0.5)
        codes = np.minimum(codes, self.max_intensity).astype(np.int64)
        if codes.ndim == 0:
            return int(codes)
        return codes
