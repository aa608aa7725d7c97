"""Core types shared across SaveForge subsystems."""
