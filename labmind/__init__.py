"""LabMind analysis service."""
