# Common: configuration, logging, error taxonomy, Document types, persistence.
