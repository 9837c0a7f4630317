# Command/query handlers for the patients and prescriptions use cases
