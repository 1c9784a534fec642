"""
Services module for gantz application.

- auth: identity provider clients (password sign-in, auth-state notifications)
- session: per-viewer session gate and admin flag
- records: DuckDB record store with store-side access policy
- storage: media uploads to Google Cloud Storage
- image_processor: upload validation and EXIF capture time
- feed: paginated feed controller and sentinel observer
- activity: landing page aggregation
"""
