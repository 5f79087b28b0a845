"""
Fixed endpoints of the music web API.
"""

LOGIN_URL = "https://www.google.com/accounts/ClientLogin"
MUSIC_ROOT_URL = "https://play.google.com/music/listen"
SERVICES_URL = "https://play.google.com/music/services/"

LOAD_ALL_TRACKS_URL = SERVICES_URL + "loadalltracks"
LOAD_PLAYLIST_URL = SERVICES_URL + "loadplaylist"
ADD_PLAYLIST_URL = SERVICES_URL + "addplaylist"
DELETE_PLAYLIST_URL = SERVICES_URL + "deleteplaylist"
SEARCH_URL = SERVICES_URL + "search"

# Formatted with the song id.
SONG_URL_TEMPLATE = "https://play.google.com/music/play?songid={song_id}&pt=e"
