"""Core domain package for dedupguard.

Core contains the ruleset reader/writer, LSH math, and the editing controller
without any file or terminal code, keeping the ruleset logic portable.
"""
