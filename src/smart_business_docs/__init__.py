"""Smart Business Docs AI conversational planning service."""
