"""Shared test vectors and builders."""
