"""fv-patcher: reconcile a local game client against a remote filelist."""

__version__ = "0.1.0"
