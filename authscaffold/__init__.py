"""authscaffold -- Auth.js boilerplate generator for Next.js App Router projects."""

__version__ = "0.1.0"
