"""bankgen - FMOD bank path code generator.

Scans compiled FMOD Studio banks and generates an enumeration of event
or bus identifiers together with a lookup table back to the original
``event:/`` / ``bus:/`` paths.

Modules:
- resolver: locate the directory holding the compiled banks
- studio: scoped offline session over the external studio backend
- collector: namespace filtering and de-duplication of raw paths
- identifiers: unique identifier synthesis
- emitter: C# / Python source rendering
- pipeline: one fetch run, end to end
"""

__version__ = "0.1.0"
