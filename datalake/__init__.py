"""
Lake Formation + Glue basic setup
Buckets, catalog, governed permissions and an Athena workgroup declared with Pulumi
"""
