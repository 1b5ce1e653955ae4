"""
HTTP interface for the appraisal service.
"""
