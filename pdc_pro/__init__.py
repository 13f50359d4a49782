"""PDC Pro - vehicle pre-delivery inspection backend and wizard client."""
