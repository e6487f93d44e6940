from __future__ import annotations


class MeasurementError(ValueError):
    """Recoverable problem with the current measurement setup."""


class UncalibratedError(MeasurementError):
    def __init__(self, image_name: str = "") -> None:
        msg = "Calibrate the image first."
        if image_name:
            msg = f"{image_name}: {msg}"
        super().__init__(msg)


class NoRegionsError(MeasurementError):
    def __init__(self, image_name: str = "") -> None:
        msg = "Draw at least one closed region."
        if image_name:
            msg = f"{image_name}: {msg}"
        super().__init__(msg)
