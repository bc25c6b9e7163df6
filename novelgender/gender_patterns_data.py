# ═════════════════════════════════════════════════════════════════════════════════
# CULTURE-PARTITIONED PATTERN LIBRARY
# ═════════════════════════════════════════════════════════════════════════════════
#
# Static tables consumed by the analyzers, partitioned by culture:
# 1. SCRIPT + ORIGIN: Unicode ranges, romanized surname/given-name regexes, context clues
# 2. NAMES: titles/honorifics, name endings, name-structure regexes, short names
# 3. CONTEXT: pronouns, archetypes, relationship templates, role nouns
# 4. APPEARANCE: descriptor words, appearance indicators, cultural idioms
# 5. MISTRANSLATION: known machine-translation pronoun-swap patterns
#
# Templates use the <NAME> placeholder. It is replaced by an escaped, word-bounded
# name pattern at match time (see text_windowing.interpolate_name), never by raw text.
# All tables are frozen after construction.
# ═════════════════════════════════════════════════════════════════════════════════

from types import MappingProxyType

NAME_PLACEHOLDER = "<NAME>"

CULTURES = ("western", "chinese", "japanese", "korean")
EAST_ASIAN_CULTURES = frozenset({"chinese", "japanese", "korean"})

# ═════════════════════════════════════════════════════════════════════════════════
# SCRIPT + ORIGIN
# ═════════════════════════════════════════════════════════════════════════════════

# Kana and Hangul are checked before Han: a name mixing kanji and kana is Japanese.
SCRIPT_RANGES = (
    ("japanese", r"[\u3040-\u309F\u30A0-\u30FF]"),
    ("korean", r"[\uAC00-\uD7AF\u1100-\u11FF\u3130-\u318F\uA960-\uA97F\uD7B0-\uD7FF]"),
    ("chinese", r"[\u4e00-\u9fff]"),
)

# Romanized name structure. Surnames anchor on the first token, given-name syllables
# must be whole tokens or hyphen parts so "Thomas" never hits the Korean "ho".
ORIGIN_NAME_PATTERNS = {
    "chinese": (
        r"^(?:Wang|Li|Zhang|Liu|Chen|Yang|Zhao|Huang|Zhou|Wu|Xu|Sun|Hu|Zhu|Gao|Lin|He|Guo|Ma|Luo|Liang"
        r"|Song|Zheng|Xie|Tang|Feng|Yu|Dong|Xiao|Cao|Deng|Cheng|Wei|Shen|Jiang|Ye|Shi|Yan|Murong|Ouyang"
        r"|Shangguan|Situ|Zhuge)\b",
        r"^(?:Sect Master|Young Master|Elder|Ancestor|Grandmaster|Immortal|Dao Lord|Sovereign|Venerable"
        r"|Imperial|Heavenly|Divine|Martial)\b",
        r"^(?:Xiao|Lao|Da|Er|San)[\s-]",
        r"\b(?:Xiang|Tian|Pan|Yuan|Lu|Yao|Peng|Zou|Xiong|Qian|Dai|Fu|Ding|Feng|Hao|Ming|Xue|Ling|Qing"
        r"|Xuan|Chen|Zhen|Yun|Mei)\b",
    ),
    "japanese": (
        r"^(?:Sato|Suzuki|Takahashi|Tanaka|Watanabe|Ito|Yamamoto|Nakamura|Kobayashi|Kato|Yoshida|Yamada"
        r"|Sasaki|Yamaguchi|Matsumoto|Inoue|Kimura|Hayashi|Shimizu|Yamazaki|Mori|Abe|Ikeda|Hashimoto"
        r"|Ishikawa|Uchiha|Kurosaki|Fujiwara|Minamoto|Tokugawa)\b",
        r"\b(?:Akira|Yuki|Haruto|Soma|Yuma|Ren|Haru|Sora|Haruki|Ayumu|Riku|Taiyo|Hinata|Yamato|Minato"
        r"|Yuto|Sota|Yui|Hina|Koharu|Mio|Miyu|Kokona|Hana|Yuna|Sakura|Saki|Ichika|Akari|Himari)\b",
        r"-(?:san|kun|chan|sama|sensei|senpai|dono)$",
    ),
    "korean": (
        r"^(?:Kim|Lee|Park|Choi|Jung|Kang|Cho|Yoon|Jang|Lim|Oh|Seo|Shin|Kwon|Hwang|Ahn|Yoo|Hong|Jeon"
        r"|Moon|Baek|Chung|Bae|Ryu|Han|Song)\b",
        r"\b(?:Min|Seung|Hyun|Sung|Jin|Soo|Jun|Ji|Hye|Joon|Woo|Kyung|Jae|Eun|Yong|Hee|Hyung"
        r"|Cheol|Kwang|Tae|Yeon|Seok|Hwan)\b",
    ),
}

# Counted (every occurrence) inside the wide proximity window around the name.
ORIGIN_CONTEXT_CLUES = {
    "chinese": (
        r"\b(?:Shanghai|Beijing|Guangzhou|Chinese|China|Mandarin|Cantonese|Dynasty|Cultivation|Dao|Qi"
        r"|Taoist|Daoist|Wuxia|Xianxia|Jianghu)\b",
        r"\b(?:Shizun|Shifu|Shidi|Shixiong|Shimei|Shijie|Gongzi|Gege|Jiejie|Meimei|Dage|Guniang|Xiaojie)\b",
    ),
    "japanese": (
        r"\b(?:Tokyo|Osaka|Kyoto|Japanese|Japan|Senpai|Sensei|Hakase|Katana|Shinobi|Ninja|Samurai|Shogun"
        r"|Daimyo|Ronin)\b",
        r"\b(?:Onee|Onii|Imouto|Otouto|Okaa|Otou|Obaa|Ojii)[\w-]*|-(?:san|kun|chan|sama|dono|sensei)\b",
    ),
    "korean": (
        r"\b(?:Seoul|Busan|Incheon|Korean|Korea|Hangul|Hanbok|Kimchi|Chaebol|Manhwa|Webtoon)\b",
        r"\b(?:Hyung|Noona|Nuna|Oppa|Unnie|Unni|Sunbae|Hoobae|Dongsaeng|Chingu|Ahjussi|Ahjumma|Halmeoni"
        r"|Harabeoji)\b",
    ),
}

# Broad genre vocabulary; one hit per culture is enough.
LINGUISTIC_DOMAIN_PATTERNS = {
    "chinese": r"\b(?:dao|qi|cultivation|cultivator|immortal|sect|martial arts|dantian|meridians?|profound"
    r"|spiritual energy|foundation establishment|core formation|nascent soul|spirit stones?|pill"
    r"|elixir|alchemy|tribulation|bottleneck|dao heart|dao friend|jianghu|young master|patriarch"
    r"|senior brother|junior sister|senior sister|junior brother)\b",
    "japanese": r"\b(?:senpai|kohai|sensei|baka|sugoi|kawaii|tsundere|yandere|otaku|ninja|samurai|katana"
    r"|shrine|kami|yokai|oni|matsuri|bento|onigiri|mochi|dojo|shihan|bushido)\b",
    "korean": r"\b(?:oppa|unni|hyung|noona|dongsaeng|sunbae|hoobae|aigoo|daebak|kimchi|bulgogi|bibimbap"
    r"|soju|makgeolli|hanbok|taekwondo|hallyu|chaebol)\b",
}

# ═════════════════════════════════════════════════════════════════════════════════
# CULTURAL GENDER INDICATORS
# ═════════════════════════════════════════════════════════════════════════════════

# Exact phrases around the name, weight 3. Western carries the explicit "is a man" forms.
EXACT_CULTURAL_PHRASES = {
    "western": {
        "male": (
            "<NAME> is a man",
            "<NAME> is male",
            "<NAME>, a man",
            "<NAME>, a male",
            "<NAME> was a man",
            "<NAME> was male",
            "<NAME>, the man",
            "man named <NAME>",
        ),
        "female": (
            "<NAME> is a woman",
            "<NAME> is female",
            "<NAME>, a woman",
            "<NAME>, a female",
            "<NAME> was a woman",
            "<NAME> was female",
            "<NAME>, the woman",
            "woman named <NAME>",
        ),
    },
    "chinese": {
        "male": (
            "<NAME> xiong",
            "<NAME> ge",
            "<NAME> gege",
            "<NAME> dage",
            "<NAME> shixiong",
            "<NAME> shidi",
            "<NAME> shifu",
            "<NAME> gongzi",
        ),
        "female": (
            "<NAME> mei",
            "<NAME> jie",
            "<NAME> jiejie",
            "<NAME> shimei",
            "<NAME> shijie",
            "<NAME> guniang",
            "<NAME> xiaojie",
            "<NAME> gongzhu",
        ),
    },
    "japanese": {
        "male": ("<NAME>-kun", "<NAME> kun", "<NAME>-dono", "<NAME> dono", "<NAME>-ouji"),
        "female": ("<NAME>-chan", "<NAME> chan", "<NAME> ojousama", "<NAME>-hime", "<NAME>-jou"),
    },
    "korean": {
        "male": ("<NAME>-gun", "<NAME> gun", "<NAME> hyung", "<NAME> oppa", "<NAME> hyungnim"),
        "female": ("<NAME>-yang", "<NAME> yang", "<NAME> unni", "<NAME> eonni", "<NAME> noona"),
    },
}

# Terms checked inside the 50-char proximity window, weight 2. Gender-neutral terms
# (senpai, sensei, -san, -sama, ssi, sunbae) are deliberately absent.
CULTURAL_PROXIMITY_TERMS = {
    "western": {"male": (), "female": ()},
    "chinese": {
        "male": (
            "shixiong",
            "shidi",
            "gege",
            "dage",
            "tangge",
            "shushu",
            "bobo",
            "yeye",
            "shifu",
            "gongzi",
            "laoye",
            "wangye",
            "shizi",
            "langjun",
            "xiansheng",
            "shaoye",
            "fuma",
            "shizun",
            "nanren",
            "xiongdi",
            "shishu",
            "shibo",
            "fuqin",
        ),
        "female": (
            "shijie",
            "shimei",
            "jiejie",
            "meimei",
            "tangjie",
            "tangmei",
            "ayi",
            "nainai",
            "guniang",
            "xiaojie",
            "furen",
            "taitai",
            "wangfei",
            "gongzhu",
            "niangniang",
            "guifei",
            "gupo",
            "shitai",
            "shiniang",
            "nuren",
            "jiemei",
            "niangzi",
        ),
    },
    "japanese": {
        "male": (
            "otoko",
            "shounen",
            "danshi",
            "oniisan",
            "otouto",
            "ojisan",
            "ojiisan",
            "otousan",
            "danna",
            "shujin",
            "bocchama",
            "tono",
            "aniki",
        ),
        "female": (
            "onna",
            "shoujo",
            "joshi",
            "oneesan",
            "imouto",
            "obasan",
            "obaasan",
            "okaasan",
            "tsuma",
            "okusan",
            "kanai",
            "ojousama",
            "hime",
            "aneue",
        ),
    },
    "korean": {
        "male": ("namja", "sonyeon", "abeoji", "hyeong", "hyung", "oppa", "ajussi", "ahjussi", "harabeoji", "nampyeon"),
        "female": ("yeoja", "sonyeo", "eomeoni", "unni", "eonni", "ajumma", "ahjumma", "halmeoni", "anae", "noona"),
    },
}

# East-Asian narrative idioms near the name, weight 2.
EAST_ASIAN_IDIOM_PATTERNS = {
    "male": (
        r"\bthis young master\b",
        r"\bthis master\b",
        r"\bthis lord\b",
        r"\bthis prince\b",
        r"\bthis humble one\b",
        r"\bthis lowly one\b",
        r"\bsenior brother\b",
        r"\bjunior brother\b",
        r"\bdisciple brother\b",
        r"<NAME>-kun\b",
        r"\bhe cultivated\b",
        r"\bhis cultivation\b",
        r"\bhis martial arts\b",
        r"\bhis sword\b",
        r"\bhis qi\b",
        r"\bhis dao\b",
        r"\bhis blade\b",
    ),
    "female": (
        r"\bthis young lady\b",
        r"\bthis miss\b",
        r"\bthis princess\b",
        r"\bthis maiden\b",
        r"\bthis fairy\b",
        r"\bthis concubine\b",
        r"\bsenior sister\b",
        r"\bjunior sister\b",
        r"\bdisciple sister\b",
        r"<NAME>-chan\b",
        r"\bher fairy\b",
        r"\bher beauty\b",
        r"\bher cultivation\b",
        r"\bher slender\b",
        r"\bher jade\b",
        r"\bher fragrance\b",
    ),
}

# Address terms found inside a quotation that mentions the name, weight 2.
DIALOGUE_ADDRESS_TERMS = {
    "chinese": {
        "male": ("gege", "dage", "xiongzhang", "shixiong", "shidi", "shizun"),
        "female": ("jiejie", "dajie", "meimei", "shijie", "shimei", "guniang"),
    },
    "japanese": {
        "male": ("oniisan", "nii-san", "onii-chan", "aniki", "otouto"),
        "female": ("oneesan", "nee-san", "onee-chan", "aneue", "imouto"),
    },
    "korean": {
        "male": ("oppa", "hyung", "orabeoni"),
        "female": ("unni", "eonni", "nuna", "noona", "agassi"),
    },
}

# ═════════════════════════════════════════════════════════════════════════════════
# NAMES: TITLES, ENDINGS, STRUCTURE, SHORT NAMES
# ═════════════════════════════════════════════════════════════════════════════════

# Western has no title table. Titles shared by both genders (Sensei, Sunbae, ...) are omitted.
# Titles starting with "-" are attached suffixes ("Taro-kun").
TITLES = {
    "chinese": {
        "male": (
            "Young Master",
            "Sect Master",
            "Dage",
            "Gege",
            "Shixiong",
            "Shidi",
            "Shizun",
            "Shifu",
            "Taoist",
            "Monk",
            "Gongzi",
            "Laoye",
            "Fujun",
            "Xiandi",
            "Huangdi",
            "Shaoye",
            "Shibo",
            "Shishu",
            "Da-ge",
            "Er-ge",
            "San-ge",
            "Si-ge",
            "Wu-ge",
            "Liu-ge",
            "Elder",
        ),
        "female": (
            "Young Lady",
            "Young Miss",
            "Fairy Maiden",
            "Jiejie",
            "Meimei",
            "Shijie",
            "Shimei",
            "Guniang",
            "Xiaojie",
            "Furen",
            "Taitai",
            "Niangniang",
            "Huanghou",
            "Gongzhu",
            "Wangfei",
            "Guifei",
            "Gupo",
            "Shenshen",
            "Da-jie",
            "Er-jie",
            "San-jie",
            "Si-jie",
            "Wu-jie",
            "Liu-jie",
            "Aunt",
        ),
    },
    "japanese": {
        "male": (
            "Oniisan",
            "Onii-san",
            "Onii-sama",
            "Onii-chan",
            "Otouto",
            "Aniki",
            "-kun",
            "Oji-san",
            "Otou-san",
            "Otou-sama",
            "Ojii-san",
            "Ojii-sama",
            "Bocchama",
            "Shishou",
            "Daimyo",
            "Shogun",
            "Tono",
            "Oyaji",
        ),
        "female": (
            "Oneesan",
            "Onee-san",
            "Onee-sama",
            "Onee-chan",
            "Imouto",
            "Aneue",
            "-chan",
            "Oba-san",
            "Okaa-san",
            "Okaa-sama",
            "Obaa-san",
            "Obaa-sama",
            "Ojou-sama",
            "Hime",
            "Himedono",
            "Okaasan",
        ),
    },
    "korean": {
        "male": ("Oppa", "Hyung", "Hyungnim", "Ahjussi", "Harabeoji", "Samchon", "Appa", "Abeonim", "Daegam"),
        "female": ("Unni", "Eonni", "Nuna", "Noona", "Ahjumma", "Halmeoni", "Imo", "Eomma", "Eomeonim", "Agassi"),
    },
}

# Checked against the lowercased first token; female endings first.
NAME_ENDINGS = {
    "chinese": {
        "female": (
            "xia",
            "qian",
            "ying",
            "yan",
            "yun",
            "juan",
            "xin",
            "min",
            "ning",
            "ping",
            "zhen",
            "hua",
            "jiao",
            "qiao",
            "mei",
            "yue",
            "lian",
        ),
        "male": (
            "hao",
            "wei",
            "jian",
            "feng",
            "ming",
            "tao",
            "cheng",
            "jun",
            "gang",
            "long",
            "peng",
            "kun",
            "fei",
            "tai",
            "bo",
            "hai",
            "yu",
            "bang",
        ),
    },
    "japanese": {
        "female": ("ko", "mi", "na", "ka", "ri", "yo", "sa", "kana", "saki", "nami"),
        "male": ("ro", "ta", "to", "ji", "shi", "ya", "suke", "kazu", "hiro", "aki", "ma", "ichi", "dai", "nobu"),
    },
    "korean": {
        "female": ("mi", "hee", "young", "eun", "seon", "yeon", "hye", "kyung", "ah", "soo", "joo"),
        "male": ("ho", "seok", "woo", "joon", "sung", "seung", "jun", "cheol", "tae", "hwan", "gyu", "yong"),
    },
}

# Ordered (gender, pattern) pairs tested against the full name; first match wins.
NAME_STRUCTURE_PATTERNS = {
    "chinese": (
        ("male", r"\s(?:Long|Hu|Gang|Qiang|Jian|Feng|Hao|Lei|Xiong|Biao|Wu)$"),
        ("female", r"\s(?:Mei|Ling|Xue|Lan|Fang|Juan|Ting|Na|Yan|Yue)(?:'?er)?$"),
        ("male", r"^(?:Da|Er|San)-?(?:ge|lang)\b"),
        ("female", r"^(?:Da|Er|San)-?(?:jie|niang)\b"),
    ),
    "japanese": (
        ("male", r"(?:suke|hiko|taro|maro|shi|rou)$"),
        ("female", r"(?:ko|mi|ka|na|yo)$"),
        ("male", r"^(?:Taka|Hiro|Yoshi|Kazu|Masa|Nobu)"),
        ("female", r"^(?:Saku|Mao|Miku|Yui)"),
    ),
    "korean": (
        ("male", r"(?:ho|hwan|jun|seok|cheol|sik)$"),
        ("female", r"(?:mi|hee|ah|ran|young)$"),
        ("male", r"^(?:Seung|Jae|Do|Woo|Tae)[\s-]"),
        ("female", r"^(?:Seo|Hye|Yeon|Hee|Eun)[\s-]"),
    ),
}

# Curated short given names, male checked first. Han names are romanized before lookup.
SHORT_NAMES = {
    "chinese": {
        "male": ("Bo", "Yi", "Yu", "Lei", "Hao", "Jie", "Jun", "Wei", "Gang", "Tao", "Long"),
        "female": ("Yan", "Xin", "Mei", "Li", "Jing", "Ying", "Na", "Ling", "Xue", "Lan"),
    },
    "japanese": {
        "male": ("Ren", "Ryo", "Sho", "Ken", "Jo"),
        "female": ("Aya", "Rin", "Yui", "Emi", "Mio"),
    },
    "korean": {
        "male": ("Ho", "Woo", "Tae"),
        "female": ("Mi", "Ah", "Eun"),
    },
}

# ═════════════════════════════════════════════════════════════════════════════════
# PRONOUNS, ARCHETYPES, RELATIONSHIPS, ROLES
# ═════════════════════════════════════════════════════════════════════════════════

PRONOUNS = {
    "male": ("he", "him", "his"),
    "female": ("she", "her", "hers"),
}

ARCHETYPES = {
    "male": ("young master", "male lead", "hero", "protagonist", "cultivator", "master", "patriarch"),
    "female": ("young miss", "young lady", "female lead", "heroine", "maiden", "matriarch"),
}

# "<NAME>'s wife" makes NAME male. Only spousal and romantic partners are used here:
# kin nouns ("Tom's sister") say nothing about Tom.
POSSESSIVE_PARTNERS = {
    "male": ("wife", "girlfriend", "bride", "fiancee", "concubine"),
    "female": ("husband", "boyfriend", "groom", "fiance"),
}

DIALOGUE_ATTRIBUTION_VERBS = (
    "said",
    "replied",
    "asked",
    "shouted",
    "whispered",
    "exclaimed",
    "muttered",
    "responded",
    "commented",
)

SPEAKER_CLAUSE_VERBS = ("said", "replied", "asked", "exclaimed", "whispered", "muttered")

# Verbs that attach a following pronoun to the speaker named before them.
REFERENCE_SPEECH_VERBS = ("said", "replied", "asked", "exclaimed")

# Literal relationship phrases, first match wins per side, weight 3.
RELATIONSHIP_PHRASES = {
    "male": (
        "<NAME> was her husband",
        "<NAME> is her husband",
        "<NAME>'s wife",
        "<NAME> was the father",
        "<NAME> was the son",
        "<NAME> was the brother",
        "<NAME> was the uncle",
        "<NAME> was the grandfather",
        "<NAME> was the grandson",
        "<NAME> was the king",
        "<NAME> was the prince",
        "<NAME> was the emperor",
        "<NAME> was the lord",
        "<NAME> was the duke",
        "<NAME> was the boyfriend",
        "<NAME>, the husband",
        "<NAME>, the father",
        "<NAME>, the brother",
    ),
    "female": (
        "<NAME> was his wife",
        "<NAME> is his wife",
        "<NAME>'s husband",
        "<NAME> was the mother",
        "<NAME> was the daughter",
        "<NAME> was the sister",
        "<NAME> was the aunt",
        "<NAME> was the grandmother",
        "<NAME> was the granddaughter",
        "<NAME> was the queen",
        "<NAME> was the princess",
        "<NAME> was the empress",
        "<NAME> was the lady",
        "<NAME> was the duchess",
        "<NAME> was the girlfriend",
        "<NAME>, the wife",
        "<NAME>, the mother",
        "<NAME>, the sister",
    ),
}

ROLE_NOUNS = {
    "male": {
        "western": (
            "king",
            "prince",
            "duke",
            "lord",
            "emperor",
            "knight",
            "wizard",
            "sorcerer",
            "warrior",
            "hunter",
            "guard",
            "soldier",
            "general",
        ),
        "chinese": (
            "sect leader",
            "patriarch",
            "young master",
            "elder",
            "emperor",
            "king",
            "prince",
            "cultivator",
            "hero",
            "swordsman",
            "senior brother",
            "junior brother",
            "master",
        ),
        "japanese": (
            "shogun",
            "daimyo",
            "samurai",
            "ninja",
            "ronin",
            "master",
            "lord",
            "warrior",
            "hero",
            "monk",
            "priest",
        ),
        "korean": ("king", "prince", "general", "warrior", "master", "hero", "hunter", "lord", "scholar", "minister"),
    },
    "female": {
        "western": (
            "queen",
            "princess",
            "duchess",
            "lady",
            "empress",
            "witch",
            "sorceress",
            "priestess",
            "maiden",
            "huntress",
            "maid",
            "nurse",
        ),
        "chinese": (
            "sect mistress",
            "matriarch",
            "young miss",
            "fairy",
            "immortal maiden",
            "empress",
            "queen",
            "princess",
            "concubine",
            "senior sister",
            "junior sister",
            "mistress",
        ),
        "japanese": (
            "princess",
            "empress",
            "geisha",
            "miko",
            "kunoichi",
            "lady",
            "mistress",
            "sorceress",
            "priestess",
            "shrine maiden",
        ),
        "korean": ("queen", "princess", "lady", "empress", "maiden", "sorceress", "priestess", "shaman"),
    },
}

ROMANTIC_VERBS = ("loved", "kissed", "embraced", "married", "dating", "dated", "wed")

KINSHIP_NOUNS = (
    "brother",
    "sister",
    "son",
    "daughter",
    "father",
    "mother",
    "husband",
    "wife",
    "uncle",
    "aunt",
    "nephew",
    "niece",
    "grandfather",
    "grandmother",
)

# Relationship word -> {partner gender: inferred gender}; "*" applies regardless of partner.
RELATIONSHIP_GENDER_RULES = MappingProxyType(
    {
        "loved": {"male": "female", "female": "male"},
        "kissed": {"male": "female", "female": "male"},
        "embraced": {"male": "female", "female": "male"},
        "married": {"male": "female", "female": "male"},
        "dating": {"male": "female", "female": "male"},
        "dated": {"male": "female", "female": "male"},
        "wed": {"male": "female", "female": "male"},
        "husband": {"female": "male"},
        "wife": {"male": "female"},
        "father": {"*": "male"},
        "son": {"*": "male"},
        "brother": {"*": "male"},
        "uncle": {"*": "male"},
        "nephew": {"*": "male"},
        "grandfather": {"*": "male"},
        "mother": {"*": "female"},
        "daughter": {"*": "female"},
        "sister": {"*": "female"},
        "aunt": {"*": "female"},
        "niece": {"*": "female"},
        "grandmother": {"*": "female"},
    }
)

GROUP_CONNECTORS = ("and", "with", "alongside")

# Templates linking a character (<NAME>) to a trusted partner (<OTHER>). The captured
# group is looked up in RELATIONSHIP_GENDER_RULES.
_KINSHIP_ALTERNATION = "|".join(KINSHIP_NOUNS)
_ROMANTIC_ALTERNATION = "|".join(ROMANTIC_VERBS)

ROMANTIC_TEMPLATES = (
    r"<NAME>[^.!?]*\b(" + _ROMANTIC_ALTERNATION + r")\b[^.!?]*<OTHER>",
    r"<OTHER>[^.!?]*\b(" + _ROMANTIC_ALTERNATION + r")\b[^.!?]*<NAME>",
)

# The kin noun always describes <NAME>: "Tom is Mary's brother", "Mary's brother, Tom".
KINSHIP_TEMPLATES = (
    r"<NAME>\s+(?:is|was)\s+<OTHER>['\u2019]s\s+(?:[\w-]+\s+)?(" + _KINSHIP_ALTERNATION + r")\b",
    r"<OTHER>['\u2019]s\s+(?:[\w-]+\s+)?(" + _KINSHIP_ALTERNATION + r"),?\s+<NAME>",
    r"<NAME>,\s+<OTHER>['\u2019]s\s+(?:[\w-]+\s+)?(" + _KINSHIP_ALTERNATION + r")\b",
    r"<NAME>\s+(?:is|was)\s+(?:the|a|an)\s+(?:[\w-]+\s+)?(" + _KINSHIP_ALTERNATION + r")\s+of\s+<OTHER>",
)

# ═════════════════════════════════════════════════════════════════════════════════
# APPEARANCE
# ═════════════════════════════════════════════════════════════════════════════════

DESCRIPTORS = {
    "male": (
        "handsome",
        "muscular",
        "beard",
        "moustache",
        "mustache",
        "stubble",
        "broad-shouldered",
        "rugged",
        "masculine",
        "gentleman",
        "stocky",
        "manly",
        "chiseled",
        "goatee",
        "sideburns",
        "baritone",
        "gruff",
        "virile",
        "brawny",
    ),
    "female": (
        "beautiful",
        "pretty",
        "gorgeous",
        "lovely",
        "pregnant",
        "makeup",
        "slender",
        "feminine",
        "graceful",
        "voluptuous",
        "petite",
        "curvy",
        "gown",
        "skirt",
        "blouse",
        "lipstick",
        "bosom",
        "womanly",
        "dainty",
    ),
}

APPEARANCE_TRIGGERS = ("appearance", "looked", "dressed", "wore", "figure", "face", "hair", "features")

APPEARANCE_INDICATORS = {
    "male": (
        "short hair",
        "crew cut",
        "buzz cut",
        "broad shoulders",
        "tall and strong",
        "muscular build",
        "chiseled jaw",
        "square jaw",
        "strong jaw",
        "adam's apple",
        "facial hair",
        "stubble",
        "beard",
        "mustache",
        "moustache",
        "barrel chest",
        "deep voice",
        "suit and tie",
        "tuxedo",
        "his physique",
        "brawny",
        "handsome",
        "rugged",
        "sword at his waist",
        "fierce eyes",
        "battle robe",
        "powerful build",
        "masculine energy",
    ),
    "female": (
        "long hair",
        "flowing hair",
        "braided hair",
        "ponytail",
        "slender waist",
        "hourglass figure",
        "feminine figure",
        "delicate features",
        "full lips",
        "long lashes",
        "smooth skin",
        "narrow shoulders",
        "ample bosom",
        "cleavage",
        "dress",
        "skirt",
        "blouse",
        "her physique",
        "makeup",
        "painted nails",
        "pretty",
        "beautiful",
        "gorgeous",
        "jade skin",
        "snow-white skin",
        "willow waist",
        "cherry lips",
        "peach blossom eyes",
        "slender fingers",
        "fairy-like appearance",
        "phoenix eyes",
        "jade bracelet",
        "hairpin",
        "rouge",
    ),
}

CULTURAL_APPEARANCE_IDIOMS = {
    "chinese": {
        "male": (
            "jade-like face",
            "cold expression",
            "stern face",
            "cultivation robe",
            "profound eyes",
            "commanding aura",
            "sword at waist",
            "male immortal",
            "imposing manner",
            "disciple robe",
        ),
        "female": (
            "beautiful maiden",
            "fairy maiden",
            "slender figure",
            "graceful posture",
            "jade hands",
            "snow-white skin",
            "willow waist",
            "fairy dress",
            "silk sleeves",
            "female immortal",
            "phoenix hairpin",
            "lotus steps",
        ),
    },
    "japanese": {
        "male": ("hakama", "samurai outfit", "warrior's build", "monk's robe", "stoic face", "topknot"),
        "female": ("yukata", "petite figure", "modest posture", "geisha", "long sleeves", "furisode"),
    },
    "korean": {
        "male": ("gat", "scholarly appearance", "noble bearing", "dignified manner", "topknot"),
        "female": ("graceful lady", "binyeo", "jeogori", "elegant posture", "gentle manner"),
    },
}

# ═════════════════════════════════════════════════════════════════════════════════
# KNOWN MISTRANSLATION PATTERNS
# ═════════════════════════════════════════════════════════════════════════════════

# (pattern template, dominant gender, error type). The first pronoun attached to the
# name is taken as the intended one; the later, opposite pronoun is the swap.
MISTRANSLATION_PATTERNS = (
    (
        r"<NAME>[^.!?]{0,20}\bhe\b[^.!?]{0,50}<NAME>[^.!?]{0,20}\bshe\b",
        "male",
        "machine translation alternating",
    ),
    (
        r"<NAME>[^.!?]{0,20}\bshe\b[^.!?]{0,50}<NAME>[^.!?]{0,20}\bhe\b",
        "female",
        "machine translation alternating",
    ),
    (
        r"\"[^\"]+\", (?:he|his)\b[^.!?]{0,20}<NAME>[^.!?]*\bshe\b",
        "male",
        "dialogue-attribution",
    ),
    (
        r"\"[^\"]+\", (?:she|her)\b[^.!?]{0,20}<NAME>[^.!?]*\bhe\b",
        "female",
        "dialogue-attribution",
    ),
)

# ═════════════════════════════════════════════════════════════════════════════════
# FREEZE
# ═════════════════════════════════════════════════════════════════════════════════

ORIGIN_NAME_PATTERNS = MappingProxyType(ORIGIN_NAME_PATTERNS)
ORIGIN_CONTEXT_CLUES = MappingProxyType(ORIGIN_CONTEXT_CLUES)
LINGUISTIC_DOMAIN_PATTERNS = MappingProxyType(LINGUISTIC_DOMAIN_PATTERNS)
EXACT_CULTURAL_PHRASES = MappingProxyType(EXACT_CULTURAL_PHRASES)
CULTURAL_PROXIMITY_TERMS = MappingProxyType(CULTURAL_PROXIMITY_TERMS)
EAST_ASIAN_IDIOM_PATTERNS = MappingProxyType(EAST_ASIAN_IDIOM_PATTERNS)
DIALOGUE_ADDRESS_TERMS = MappingProxyType(DIALOGUE_ADDRESS_TERMS)
TITLES = MappingProxyType(TITLES)
NAME_ENDINGS = MappingProxyType(NAME_ENDINGS)
NAME_STRUCTURE_PATTERNS = MappingProxyType(NAME_STRUCTURE_PATTERNS)
SHORT_NAMES = MappingProxyType(SHORT_NAMES)
PRONOUNS = MappingProxyType(PRONOUNS)
ARCHETYPES = MappingProxyType(ARCHETYPES)
POSSESSIVE_PARTNERS = MappingProxyType(POSSESSIVE_PARTNERS)
RELATIONSHIP_PHRASES = MappingProxyType(RELATIONSHIP_PHRASES)
ROLE_NOUNS = MappingProxyType(ROLE_NOUNS)
DESCRIPTORS = MappingProxyType(DESCRIPTORS)
APPEARANCE_INDICATORS = MappingProxyType(APPEARANCE_INDICATORS)
CULTURAL_APPEARANCE_IDIOMS = MappingProxyType(CULTURAL_APPEARANCE_IDIOMS)
