"""Launch Claude Code against AWS Bedrock."""

__version__ = "3.0.0"
