"""Exception types raised by imgcore algorithms."""

__all__ = [
    "EmptyInputError",
    "ImgcoreError",
    "InvalidBinCountError",
    "InvalidParameterError",
    "InvalidRadiusError",
    "InvalidShapeError",
    "InvalidThresholdError",
    "OutOfBoundsError",
    "ShapeMismatchError",
]


class ImgcoreError(ValueError):
    """Base class for all imgcore failures."""


class EmptyInputError(ImgcoreError):
    """The input array has no (usable) samples."""

    def __init__(self, param_name="data"):
        self.param_name = param_name
        super().__init__(f"Invalid array parameter, the array {param_name!r} can not be empty.")


class InvalidBinCountError(ImgcoreError):
    """A histogram was requested with a non-positive number of bins."""

    def __init__(self, bin_count):
        self.bin_count = bin_count
        super().__init__(f"bin_count must be a positive integer, got {bin_count!r}.")


class InvalidRadiusError(ImgcoreError):
    """A kernel radius is not a positive integer."""

    def __init__(self, radius):
        self.radius = radius
        super().__init__(f"radius must be a positive integer, got {radius!r}.")


class InvalidShapeError(ImgcoreError):
    """A shape descriptor is empty or holds a non-positive dimension."""


class ShapeMismatchError(ImgcoreError):
    """Two arrays that must be co-registered have different shapes."""

    def __init__(self, a_name, a_shape, b_name, b_shape):
        self.a_shape = tuple(a_shape)
        self.b_shape = tuple(b_shape)
        super().__init__(
            f"Mismatched array shapes, {a_name!r} with shape {self.a_shape} "
            f"and {b_name!r} with shape {self.b_shape} do not match."
        )


class InvalidThresholdError(ImgcoreError):
    """A channel threshold lies outside the channel's observed data range."""

    def __init__(self, param_name, value, low, high):
        self.param_name = param_name
        self.value = value
        self.low = low
        self.high = high
        super().__init__(
            f"{param_name} must lie within the channel range [{low}, {high}], got {value}."
        )


class OutOfBoundsError(ImgcoreError, IndexError):
    """Shape and stride arithmetic reaches outside the backing buffer."""


class InvalidParameterError(ImgcoreError):
    """A scalar parameter is outside its valid domain."""
