"""
Stage composition.

A stage is any callable taking an iterable and returning an iterator.
Pipeline chains them lazily:

    >>> points = (Pipeline(field_stream(text, delimiter=','))
    ...           .through(fields_to_doc(headers))
    ...           .through(validate_doc(schema, strict=True))
    ...           .through(doc_to_line_protocol('par', schema)))
    >>> for point in points:
    ...     ...

Nothing is read until the pipeline is iterated.
"""

from typing import Any, Callable, Iterable, Iterator, List

Stage = Callable[[Iterable[Any]], Iterator[Any]]


class Pipeline:
    """Lazily chained stages over a source iterable."""

    def __init__(self, source: Iterable[Any]):
        self._source = source
        self._stages: List[Stage] = []

    def through(self, stage: Stage) -> 'Pipeline':
        """Append a stage. Returns self for chaining."""
        if not callable(stage):
            raise TypeError(f"Pipeline stage must be callable, got {type(stage).__name__}")
        self._stages.append(stage)
        return self

    def map(self, func: Callable[[Any], Any]) -> 'Pipeline':
        """Append a stage applying ``func`` to each item."""
        return self.through(lambda items: (func(item) for item in items))

    def __iter__(self) -> Iterator[Any]:
        stream: Iterable[Any] = self._source
        for stage in self._stages:
            stream = stage(stream)
        return iter(stream)


__all__ = ['Pipeline', 'Stage']
