"""JSON schema definitions, generation from Python types, and validation."""