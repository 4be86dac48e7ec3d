"""Core configuration and exceptions for AdInsight."""
