"""
Comment widget client.

A framework-free rendition of the post comments widget: paginated fetch,
create/update/delete through the JSON API, and a render tree of plain
view models. Hosts plug in a transport and a visibility observer.
"""
