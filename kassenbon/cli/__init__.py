"""Unified command-line interface for the kassenbon project.

Usage:
    kb parse <file.html>
    kb parse <file.html> --json
    kb ingest [--maildir PATH] [--data-dir PATH]
    kb serve [--port]
    kb list-stores
    kb list-purchases
"""
