"""
API gateway: public HTTP edge of the service mesh
"""
