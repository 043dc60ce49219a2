"""Collection engine: include parsing, matching, transformation, discovery, run."""
