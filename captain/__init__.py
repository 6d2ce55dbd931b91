"""Captain: versioned deploys and upgrades of Solana programs."""

__version__ = "0.3.0"
