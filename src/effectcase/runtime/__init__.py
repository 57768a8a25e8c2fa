"""Runtime support for running programs: retry policies and observability."""
