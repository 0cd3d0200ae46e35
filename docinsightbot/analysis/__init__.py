"""Analysis stages: prompt composition, invocation, validation and fallbacks."""
