from .process import STDERR, STDOUT, stream_process

__all__ = ["STDERR", "STDOUT", "stream_process"]
