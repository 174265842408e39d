"""Test suite for Bodyguard.

This package contains tests for:
- Core types and violation serialization
- Validator context (paths, ancestry, condition scoping, value replacement)
- Others-expression parsing and evaluation
- Constraint composition (sets, conditional and array-conditional wrappers)
- Built-in constraints
- The validation engine (end-to-end scenarios, structural errors, stop semantics)
- Internationalization of messages
- Loading and dumping validators
"""
