"""
HyperGrid Exception Hierarchy.

HyperGridError (base, Exception)
├── HyperGridConfigError(HyperGridError, ValueError)      ← search configuration
│   ├── InvalidGridError                                   ← empty value sets / no dimensions
│   │   └── GridTooLargeError                              ← > 63-bit combination count
│   ├── InvalidCountError                                  ← non-positive sample count
│   ├── InvalidParameterError                              ← unparseable / unknown option
│   ├── AmbiguousMetricError                               ← metric has no direction
│   └── SnapshotNotSupportedError                          ← save_snapshot requested
├── HyperGridReferenceError(HyperGridError, LookupError)  ← unresolved references
│   └── UnknownGeneratorError                              ← unknown random generator
└── HyperGridDatasetError(HyperGridError)                  ← data I/O and layout
    └── OrderedDataError                                   ← ordered objects in a split search

HyperGridConfigError multi-inherits from ValueError so callers can keep
plain ``except ValueError`` blocks around search setup.
"""


class HyperGridError(Exception):
    """Base exception for all HyperGrid errors."""


class HyperGridConfigError(HyperGridError, ValueError):
    """Configuration validation error (backward-compatible with ValueError)."""


class InvalidGridError(HyperGridConfigError):
    """Parameter grid has no dimensions or an empty set of values."""


class GridTooLargeError(InvalidGridError):
    """Total number of combinations does not fit into 63 bits."""


class InvalidCountError(HyperGridConfigError):
    """Requested number of randomized tries is not a positive number."""


class InvalidParameterError(HyperGridConfigError):
    """Option name is unknown or its value is unparseable or out of range."""


class AmbiguousMetricError(HyperGridConfigError):
    """Metric declares neither minimization nor maximization."""


class SnapshotNotSupportedError(HyperGridConfigError):
    """Snapshot saving was requested for a parameter search."""


class HyperGridReferenceError(HyperGridError, LookupError):
    """A symbolic reference could not be resolved."""


class UnknownGeneratorError(HyperGridReferenceError):
    """Reference to a random distribution generator that is not registered."""


class HyperGridDatasetError(HyperGridError):
    """Dataset loading, quantization, or layout error."""


class OrderedDataError(HyperGridDatasetError):
    """Parameter search over ordered objects data is not supported."""
