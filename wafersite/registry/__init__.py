"""Registry data models and an in-memory record database and blob storage."""