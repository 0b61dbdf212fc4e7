from .pipeline import get_analysis_pipeline

__all__ = ["get_analysis_pipeline"]
