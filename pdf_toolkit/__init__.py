"""Job orchestration for the pdf-toolkit processing engine."""
