"""Relational storage: databases, tables and records."""