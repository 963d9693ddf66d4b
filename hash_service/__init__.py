# Hash Service - raw file content and aggregate hashing
