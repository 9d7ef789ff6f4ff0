"""Asset enricher: object tagging and CLIP encoding jobs for a media library."""

__version__ = "0.1.0"
