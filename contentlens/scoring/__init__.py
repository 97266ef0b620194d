"""Scoring - text normalization, phrase library, features, composite scorer"""
