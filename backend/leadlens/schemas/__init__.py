# API Schemas
