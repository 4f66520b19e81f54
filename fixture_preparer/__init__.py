"""
Prepare local audio fixtures: download a source MP3, transcode and slice it.
"""
from .services.preparer import prepare, plan, PrepareResult

__all__ = ["prepare", "plan", "PrepareResult"]
__version__ = "0.1.0"
