"""stablefs -- small filesystem helpers with a stable-size guarded copy.

Core modules:
    config     -- Copy/probe tuning and logging via pydantic-settings
                  (FILEUTILS_* env vars). Out-of-range or unparsable values fall
                  back to the defaults, never to the nearest bound.
    stability  -- Size stability prober. Samples a file's size with a settle
                  delay until two consecutive samples match.
    transfer   -- Guarded copy (probe, stream, fsync) and rename-only move.
    listing    -- Prefix/suffix filtered directory listing, flat and recursive.
    csvmap     -- Delimited text to header-keyed row dicts.
    errors     -- Exception hierarchy (NotStableError, DurabilityError, ...).
    models     -- Defaults, bounds, env var names and small dataclasses.
    cli        -- Click command group wrapping the operations above.
"""
