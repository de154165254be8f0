"""NoteVault: collaborative notes, workspaces and administration."""

__version__ = "0.1.0"
