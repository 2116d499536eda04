class PlanningError(Exception):
    """Base class for failures that halt a planning run."""


class EmptyInputError(PlanningError, ValueError):
    def __init__(self, source):
        self.source = source
        super().__init__(
            "{} data is empty. Please check the '{}' source.".format(source.capitalize(), source)
        )


class SchemaViolationError(PlanningError, ValueError):
    def __init__(self, source, missing, headers):
        self.source = source
        self.missing = sorted(missing)
        self.headers = list(headers)
        super().__init__(
            "{} source missing columns: {} (headers seen: {})".format(
                source,
                ", ".join(self.missing),
                ", ".join(str(header) for header in self.headers) or "none",
            )
        )


class SourceFetchError(PlanningError, RuntimeError):
    def __init__(self, source, reason):
        self.source = source
        super().__init__("Failed to fetch {} source: {}".format(source, reason))


class SourceFormatError(PlanningError, RuntimeError):
    def __init__(self, source, reason):
        self.source = source
        super().__init__("{} source is not tabular data: {}".format(source, reason))
