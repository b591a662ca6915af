"""Failure taxonomy for vocabulary extraction runs."""


class VocabularyPipelineError(Exception):
    """Base class for errors raised by the extraction pipeline."""


class SourceUnavailable(VocabularyPipelineError):
    """The question corpus could not be paged after the allowed retries."""

    def __init__(self, message, page=None):
        super().__init__(message)
        self.page = page


class EnrichmentFailure(VocabularyPipelineError):
    """A single dictionary lookup failed. Recovered with a fallback record."""

    def __init__(self, word, reason):
        super().__init__(f"{word}: {reason}")
        self.word = word
        self.reason = reason


class ValidationRejection(VocabularyPipelineError):
    """An entry failed validation. Carries the reasons for the report."""

    def __init__(self, word, reasons):
        super().__init__(f"{word}: {', '.join(reasons)}")
        self.word = word
        self.reasons = list(reasons)


class PersistenceBatchFailure(VocabularyPipelineError):
    """A Firestore batch commit kept failing after the allowed retries."""

    def __init__(self, message, committed_batches=0, batch_index=None):
        super().__init__(message)
        self.committed_batches = committed_batches
        self.batch_index = batch_index
