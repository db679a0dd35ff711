"""
Lexicons, field candidates and defaults shared across the analytics modules.

Raw catalog exports disagree on column names, so every field is resolved
through an ordered list of candidates. The first candidate present wins.
"""

MOVIE = "Movie"
TV = "TV"
CATEGORIES = (MOVIE, TV)

# Metric modes: each has its own ordered list of acceptable columns
VALUE_FIELDS = {
    "hours": ["Watch Time", "watch_time", "WatchTime", "Hours Viewed", "hours_viewed", "HoursViewed"],
    "views": ["View Count", "view_count", "ViewCount", "Views", "views"],
}
DEFAULT_METRIC_MODE = "hours"

LANGUAGE_FIELDS = ["originalLanguage", "language", "Language", "TMDBLanguage"]
GENRE_FIELDS = ["TMDBGenres", "genres", "Genres"]
TITLE_FIELDS = ["TitleCanonical", "Title", "primaryTitle", "originalTitle", "name", "title"]
RELEASE_YEAR_FIELDS = ["ReleaseYear", "Release Date", "startYear", "premiered"]
RUNTIME_FIELDS = ["Runtime", "runtimeMinutes", "averageRuntime", "runtime"]
COUNTRY_FIELDS = ["country", "Country", "dvdCountry", "network.country", "TMDBCountry"]
POSTER_FIELDS = ["TMDBPoster", "poster"]
SUMMARY_FIELDS = ["summary", "Summary", "description"]

# Defaults used when a record gives us nothing to work with
UNSPECIFIED_GENRE = "Unspecified"
DEFAULT_LANGUAGE = "English"
NON_ENGLISH = "Non-English"
UNKNOWN_COUNTRY = "Unknown"

GENRE_ALIASES = {
    "sci-fi": "sci-fi",
    "sci fi": "sci-fi",
    "scifi": "sci-fi",
    "science": "sci-fi",
    "fiction": "sci-fi",
    "science fiction": "sci-fi",
    "science-fiction": "sci-fi",
}

# Lowercase title fragment -> language label
LANGUAGE_INFERS = {
    "spanish": "Spanish",
    "french": "French",
    "german": "German",
    "korean": "Korean",
    "japanese": "Japanese",
    "chinese": "Chinese",
    "italian": "Italian",
    "portuguese": "Portuguese",
    "hindi": "Hindi",
    "russian": "Russian",
    "arabic": "Arabic",
}

COUNTRY_NAMES = {
    "us": "United States",
    "gb": "United Kingdom",
    "uk": "United Kingdom",
    "ca": "Canada",
    "fr": "France",
    "de": "Germany",
    "jp": "Japan",
    "kr": "South Korea",
    "cn": "China",
    "it": "Italy",
    "es": "Spain",
    "br": "Brazil",
    "in": "India",
    "mx": "Mexico",
    "ar": "Argentina",
    "au": "Australia",
    "nz": "New Zealand",
    "ru": "Russia",
    "se": "Sweden",
    "no": "Norway",
    "dk": "Denmark",
    "fi": "Finland",
    "nl": "Netherlands",
    "be": "Belgium",
    "tr": "Turkey",
    "ie": "Ireland",
    "ch": "Switzerland",
    "at": "Austria",
    "pl": "Poland",
    "cz": "Czechia",
    "hu": "Hungary",
    "gr": "Greece",
    "pt": "Portugal",
    "co": "Colombia",
    "cl": "Chile",
    "pe": "Peru",
    "za": "South Africa",
    "eg": "Egypt",
    "ae": "United Arab Emirates",
    "sa": "Saudi Arabia",
    "il": "Israel",
    "id": "Indonesia",
    "th": "Thailand",
    "vn": "Vietnam",
    "ph": "Philippines",
    "my": "Malaysia",
    "sg": "Singapore",
    "tw": "Taiwan",
    "hk": "Hong Kong",
}

# Language code or name -> most likely production country
LANGUAGE_COUNTRIES = {
    "en": "United States", "english": "United States",
    "es": "Spain", "spanish": "Spain",
    "pt": "Portugal", "portuguese": "Portugal",
    "fr": "France", "french": "France",
    "de": "Germany", "german": "Germany",
    "it": "Italy", "italian": "Italy",
    "ja": "Japan", "japanese": "Japan",
    "ko": "South Korea", "korean": "South Korea",
    "hi": "India", "hindi": "India",
    "zh": "China", "chinese": "China",
    "ru": "Russia", "russian": "Russia",
    "sv": "Sweden", "swedish": "Sweden",
    "da": "Denmark", "danish": "Denmark",
    "fi": "Finland", "finnish": "Finland",
    "no": "Norway", "norwegian": "Norway",
    "nl": "Netherlands", "dutch": "Netherlands",
    "tr": "Turkey", "turkish": "Turkey",
    "ar": "United Arab Emirates", "arabic": "United Arab Emirates",
    "th": "Thailand", "thai": "Thailand",
    "id": "Indonesia", "indonesian": "Indonesia",
    "pl": "Poland", "polish": "Poland",
}

# ---------- keywords ----------

STOP_WORDS = frozenset([
    "the", "a", "an", "of", "in", "on", "at", "to", "for", "and", "or", "is", "are",
    "was", "were", "be", "been", "has", "have", "had", "with", "from", "by", "this",
    "that", "will", "who", "what", "when", "where", "how", "their", "into", "out",
    "about", "after", "his", "her", "she", "they", "them", "series", "movie",
    "season", "limited", "some", "life", "world", "every", "story", "while",
    "being", "more",
])
LANGUAGE_WORDS = frozenset([
    "english", "spanish", "french", "german", "korean", "japanese", "chinese",
    "italian", "portuguese", "hindi", "russian", "arabic",
])
# Only these categories contribute their summaries to the keyword pool
LONG_FORM_CATEGORIES = (TV,)
DEFAULT_KEYWORD_LIMIT = 3

# ---------- hierarchy ----------

ROOT_NAME = "root"
END_TOKEN = "end"
SLICE_TITLES_COUNT = 3

# ---------- clustering ----------

DEFAULT_CLUSTER_COUNT = 4
MAX_KMEANS_ITERATIONS = 50
INIT_STRATEGIES = ("random", "farthest")

# (x >= 0.5, y >= 0.5) -> (quadrant key, display label)
QUADRANTS = {
    (False, False): ("cold-flat", "Background Noise"),
    (True, False): ("warm-flat", "Comfort Rewatch"),
    (False, True): ("cold-charged", "Prestige Pick"),
    (True, True): ("warm-charged", "Crowd Pleaser"),
}
