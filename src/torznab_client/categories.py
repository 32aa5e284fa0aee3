"""Standard Newznab/Torznab category ids.

See: https://newznab.readthedocs.io/en/latest/misc/api/#predefined-categories
"""

CATEGORY_ALL = ""

# Console
CATEGORY_CONSOLE = "1000"
CATEGORY_CONSOLE_NDS = "1010"
CATEGORY_CONSOLE_PSP = "1020"
CATEGORY_CONSOLE_WII = "1030"
CATEGORY_CONSOLE_XBOX = "1040"
CATEGORY_CONSOLE_XBOX360 = "1050"
CATEGORY_CONSOLE_PS3 = "1080"
CATEGORY_CONSOLE_OTHER = "1090"
CATEGORY_CONSOLE_3DS = "1110"
CATEGORY_CONSOLE_PSVITA = "1120"
CATEGORY_CONSOLE_WIIU = "1130"
CATEGORY_CONSOLE_XBOXONE = "1140"
CATEGORY_CONSOLE_PS4 = "1180"

# Movies
CATEGORY_MOVIES = "2000"
CATEGORY_MOVIES_FOREIGN = "2010"
CATEGORY_MOVIES_OTHER = "2020"
CATEGORY_MOVIES_SD = "2030"
CATEGORY_MOVIES_HD = "2040"
CATEGORY_MOVIES_UHD = "2045"
CATEGORY_MOVIES_BLURAY = "2050"
CATEGORY_MOVIES_3D = "2060"
CATEGORY_MOVIES_DVD = "2070"
CATEGORY_MOVIES_WEBDL = "2080"

# Audio
CATEGORY_AUDIO = "3000"
CATEGORY_AUDIO_MP3 = "3010"
CATEGORY_AUDIO_VIDEO = "3020"
CATEGORY_AUDIO_AUDIOBOOK = "3030"
CATEGORY_AUDIO_LOSSLESS = "3040"
CATEGORY_AUDIO_OTHER = "3050"
CATEGORY_AUDIO_FOREIGN = "3060"

# PC
CATEGORY_PC = "4000"
CATEGORY_PC_0DAY = "4010"
CATEGORY_PC_ISO = "4020"
CATEGORY_PC_MAC = "4030"
CATEGORY_PC_MOBILE_OTHER = "4040"
CATEGORY_PC_GAMES = "4050"
CATEGORY_PC_MOBILE_IOS = "4060"
CATEGORY_PC_MOBILE_ANDROID = "4070"

# TV
CATEGORY_TV = "5000"
CATEGORY_TV_WEBDL = "5010"
CATEGORY_TV_FOREIGN = "5020"
CATEGORY_TV_SD = "5030"
CATEGORY_TV_HD = "5040"
CATEGORY_TV_UHD = "5045"
CATEGORY_TV_OTHER = "5050"
CATEGORY_TV_SPORT = "5060"
CATEGORY_TV_ANIME = "5070"
CATEGORY_TV_DOCUMENTARY = "5080"

# XXX
CATEGORY_XXX = "6000"

# Books
CATEGORY_BOOKS = "7000"
CATEGORY_BOOKS_MAGS = "7010"
CATEGORY_BOOKS_EBOOK = "7020"
CATEGORY_BOOKS_COMICS = "7030"
CATEGORY_BOOKS_TECHNICAL = "7040"
CATEGORY_BOOKS_OTHER = "7050"
CATEGORY_BOOKS_FOREIGN = "7060"

# Other
CATEGORY_OTHER = "8000"
CATEGORY_OTHER_MISC = "8010"
CATEGORY_OTHER_HASHED = "8020"

# Top-level id -> name, for display
PARENT_CATEGORIES = {
    CATEGORY_CONSOLE: "Console",
    CATEGORY_MOVIES: "Movies",
    CATEGORY_AUDIO: "Audio",
    CATEGORY_PC: "PC",
    CATEGORY_TV: "TV",
    CATEGORY_XXX: "XXX",
    CATEGORY_BOOKS: "Books",
    CATEGORY_OTHER: "Other",
}


def parent_category(category: str) -> str:
    """Top-level id of a category: ``"5040"`` -> ``"5000"``.

    Custom tracker categories (100000+) and malformed ids are returned unchanged.
    """
    if len(category) == 4 and category.isdigit():
        return category[0] + "000"
    return category
