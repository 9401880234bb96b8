"""Infrastructure layer — dpkg-query access and the package graph."""
