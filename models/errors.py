"""Exceptions shared across the pipeline."""


class InputValidationError(ValueError):
    """Run input is unusable (missing prompt or provider list). Aborts the run."""


class SynthesisError(RuntimeError):
    """Delegated synthesis produced no usable structured output."""

    def __init__(self, message: str, preview: str = ""):
        self.preview = preview
        super().__init__(f"{message}\nTEXT:\n{preview}" if preview else message)
