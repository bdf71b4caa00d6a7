"""Storage collaborators: abstract interfaces and in-memory implementations."""

from genomatrix.store.base import (
    AlterationSink,
    EventStore,
    GeneCatalog,
    Sample,
    SampleRegistry,
)
from genomatrix.store.memory import (
    InMemoryAlterationSink,
    InMemoryEventStore,
    InMemoryGeneCatalog,
    InMemorySampleRegistry,
)

__all__ = [
    'GeneCatalog',
    'SampleRegistry',
    'EventStore',
    'AlterationSink',
    'Sample',
    'InMemoryGeneCatalog',
    'InMemorySampleRegistry',
    'InMemoryEventStore',
    'InMemoryAlterationSink',
]
