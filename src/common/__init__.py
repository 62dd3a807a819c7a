"""Shared configuration, error taxonomy and storage protocols."""
