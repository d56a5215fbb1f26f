"""Staging-specific errors."""

from native_stage.common import NativeStageError


class StagingError(NativeStageError):
    """Staging of native resources failed."""
    pass


class VirtualFSCopyError(StagingError):
    """Copying a virtual filesystem subtree to disk failed."""
    pass


class UnknownMountError(VirtualFSCopyError):
    """A virtual filesystem URL refers to a mount that is not registered."""
    pass


class PlainCopyError(StagingError):
    """Copying a plain file or directory failed."""
    pass


class LibraryLoadError(StagingError):
    """The staged native library could not be located or loaded."""
    pass
