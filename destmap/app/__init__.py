"""Runtime composition: adapter wiring and deferred-callback scheduling."""
