"""prsync - keeps a Bitbucket pull request's review comments in sync with analysis findings."""

__version__ = "0.1.0"
