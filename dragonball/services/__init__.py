"""Store, catalog and view-model services behind the favorites screen."""
