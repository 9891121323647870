"""nativebuild — build orchestration for the vendored maplibre-native library."""

__version__ = "0.1.0"
