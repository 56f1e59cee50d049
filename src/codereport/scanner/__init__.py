"""Scanner — log classification and the normalizer pipeline (``scanner.engine``)."""

from codereport.scanner.classifier import ClassifyResult, PatternClassifier

__all__ = ["ClassifyResult", "PatternClassifier"]
