"""LeadLens - context-grounded sales and marketing generation."""
