"""
Module: phrase_data
Purpose: AI-stylistic phrase rules for the phrase-pattern density feature.
Dependencies: None (pure data, no imports)

Separates tuning data from matching logic. Edit this file (or ship a YAML
override, see patterns.load_phrase_rules) to add/remove phrases without
touching the scorer. Each entry is (pattern, category); every rule has
weight 1.0 unless listed in HIGH_SIGNAL_RULES, which are matched
independently on top of the base library, so a high-signal phrase
effectively counts twice.
"""

# ---------------------------------------------------------------------------
# Base library
# ---------------------------------------------------------------------------

PHRASE_RULES: tuple[tuple[str, str], ...] = (
    # Sycophantic openers (very strong AI signal on social media)
    (
        r"\b(great|excellent|good|wonderful|fantastic|amazing|valid|insightful|thought[- ]?ful)"
        r"\s+(question|point|observation|perspective|post|comment|insight)\b",
        "sycophantic_opener",
    ),
    (r"\b(certainly|absolutely|of course|indeed|definitely|sure thing|sure,)\b", "sycophantic_opener"),
    (r"\bthank you for (sharing|your|the|raising|asking|bringing)\b", "sycophantic_opener"),
    (r"\bthanks for (sharing|posting|commenting|the thoughtful|your thoughtful)\b", "sycophantic_opener"),
    (r"\bthanks? for (bringing this|highlighting|pointing this out|the question)\b", "sycophantic_opener"),
    (r"\bi appreciate (your|the) (insight|perspective|input|question|comment)\b", "sycophantic_opener"),
    (r"\bthat's a (great|solid|important|fair|valid) (point|question|observation|take)\b", "sycophantic_opener"),
    (
        r"\byou('ve| have) (raised|made|brought up|touched on) (a |an )?"
        r"(valid|important|excellent|great|key|interesting)\b",
        "sycophantic_opener",
    ),
    (r"\b(i understand (your|the|your concern|the concern|that))\b", "sycophantic_opener"),
    (r"\b(i('d| would) be happy to|allow me to|let me (explain|clarify|address|break|walk))\b", "assistant_voice"),
    # AI self-identification
    (r"\bas an ai\b", "self_identification"),
    (r"\bi('m| am) an ai\b", "self_identification"),
    (r"\bas a language model\b", "self_identification"),
    (r"\bi don't have (personal |the ability to |access to |real-time)\b", "self_identification"),
    (r"\bmy (training|knowledge) (data|cutoff|base)\b", "self_identification"),
    (r"\bi cannot (browse|access|provide personal|guarantee accuracy)\b", "self_identification"),
    # Structural discourse markers
    (r"\bin (conclusion|summary|closing|short|brief|essence)\b[,:]?\s", "discourse_connective"),
    (r"\bto (summarize|recap|sum up|conclude|wrap up)\b", "discourse_connective"),
    (r"\b(firstly|secondly|thirdly|fourthly|lastly|finally)[,:\s]", "discourse_connective"),
    (r"\b(first and foremost|last but not least)\b", "discourse_connective"),
    (r"\b(on (the |)one hand|on (the |)other hand)\b", "discourse_connective"),
    (r"\bthat (said|being said|noted)[,\s]", "discourse_connective"),
    (r"\bwith that (said|in mind)[,\s]", "discourse_connective"),
    (r"\b(overall|in general|in summary|all in all|at the end of the day)[,\s]", "discourse_connective"),
    (
        r"\bit is (worth|important|essential|crucial|key) to "
        r"(note|mention|highlight|emphasize|consider|remember)\b",
        "discourse_connective",
    ),
    (
        r"\bone (key|important|crucial|critical|significant|notable) "
        r"(aspect|factor|point|consideration|thing|benefit)\b",
        "discourse_connective",
    ),
    (r"\bmove(s)? (forward|on) (by|to|with)\b", "discourse_connective"),
    # Filler transitions
    (
        r"\b(furthermore|moreover|additionally|consequently|nevertheless|nonetheless"
        r"|notwithstanding|henceforth)\b",
        "discourse_connective",
    ),
    (r"\bmore importantly\b", "discourse_connective"),
    (r"\bthat (means|suggests|implies) (that )?\b", "discourse_connective"),
    (r"\bfrom this perspective\b", "discourse_connective"),
    (r"\bin practical terms\b", "discourse_connective"),
    (r"\b(in (addition|contrast|particular|this context|this regard|other words))[,\s]", "discourse_connective"),
    (r"\b(as (a result|such|mentioned|stated|noted|discussed|outlined))[,\s]", "discourse_connective"),
    (r"\bit's (also|worth) (noting|mentioning|highlighting) that\b", "discourse_connective"),
    (r"\bthis (is|can be) (seen|observed|noted|understood) (in|as|from)\b", "discourse_connective"),
    # Corporate/consulting buzzwords
    (r"\b(leverag(e|ing|ed)|utiliz(e|ing|ed)|implement(ing|ed)?|facilitat(e|ing|ed))\b", "corporate_buzzword"),
    (r"\b(comprehensive|holistic|robust|scalable|streamline[d]?|optimize[d]?)\b", "corporate_buzzword"),
    (r"\b(synerg(y|ies|istic)|paradigm( shift)?|ecosystem|framework)\b", "corporate_buzzword"),
    (
        r"\b(actionable|impactful|innovative|transformative|disruptive|cutting[- ]edge)\b",
        "corporate_buzzword",
    ),
    (r"\b(best practices?|key takeaways?|core competenc(y|ies))\b", "corporate_buzzword"),
    (r"\b(stakeholder(s)?|deliverable(s)?|bandwidth|touch base|circle back)\b", "corporate_buzzword"),
    (r"\b(moving forward|going forward|at this juncture|in this space)\b", "corporate_buzzword"),
    # Helper/assistant phrases
    (r"\bfeel free to (ask|reach out|contact|let me know)\b", "assistant_voice"),
    (r"\bif it helps[,:\s]", "assistant_voice"),
    (r"\bhere's why\b", "assistant_voice"),
    (r"\bi hope (this (helps|clarifies|answers|is helpful)|that helps)\b", "assistant_voice"),
    (r"\bi hope this gives (you )?(clarity|context|a clearer picture)\b", "assistant_voice"),
    (
        r"\b(please (don't hesitate|feel free)|let me know if (you (have|need)|there('s| is)))\b",
        "assistant_voice",
    ),
    (
        r"\bif you (have|need) (any|further|more|additional) "
        r"(questions?|help|information|clarification)\b",
        "assistant_voice",
    ),
    (r"\b(happy to|glad to) (help|assist|answer|clarify|elaborate)\b", "assistant_voice"),
    (r"\bdon't hesitate to\b", "assistant_voice"),
    (r"\bis there anything (else|more|i can)\b", "assistant_voice"),
    # Hedging and epistemic markers
    (
        r"\bit('s| is) (important|essential|crucial|vital|critical) "
        r"(to (note|understand|remember|consider|recognize))\b",
        "hedging",
    ),
    (r"\bplease (note|be aware|keep in mind) that\b", "hedging"),
    (r"\bit('s| is) (worth|important) (noting|mentioning) that\b", "hedging"),
    (r"\b(keep in mind|bear in mind|it should be noted) that\b", "hedging"),
    (
        r"\b(generally speaking|broadly speaking|in most cases|in many cases|in some cases)\b",
        "hedging",
    ),
    (r"\b(while (it('s| is) true|this (is|may be)|there are))\b", "hedging"),
    (r"\bit depends on (the|your|several|a few)\b", "hedging"),
    (r"\bthat said[,:\s]", "hedging"),
    (r"\bto be fair[,:\s]", "hedging"),
    (
        r"\bthe (key|main|primary|core|central) "
        r"(takeaway|message|point|difference|distinction|factor) (here |is )\b",
        "hedging",
    ),
    # Blog/essay patterns
    (
        r"\b(in today's|in the modern|in the current|in the digital|in our) "
        r"(world|society|age|era|landscape|day and age)\b",
        "blog_essay",
    ),
    (r"\bthe (art|world|realm|landscape|domain|sphere|field) of\b", "blog_essay"),
    (r"\bwhen it comes to\b", "blog_essay"),
    (r"\b(plays? a (vital|crucial|key|pivotal|important|significant) role)\b", "blog_essay"),
    (
        r"\b(has (become|emerged as|proven|shown)) (a |an )?"
        r"(key|vital|essential|critical|important|popular)\b",
        "blog_essay",
    ),
    (r"\b(delve|delving|dive) (into|deeper|further)\b", "blog_essay"),
    (r"\bunlock(ing)? (the|your|its|their) (full |true |)potential\b", "blog_essay"),
    (r"\bempower(ing|ed)? (users?|individuals?|people|you|teams?)\b", "blog_essay"),
    (
        r"\bnavigate (the|this|these|a|an) (complex|challenging|ever-changing|dynamic|rapidly)\b",
        "blog_essay",
    ),
    # Social-media agreement cliches
    (
        r"\bthis (is|was) (a |an )?(great|important|interesting|excellent|valid|good) "
        r"(point|observation|take|post|thread|discussion)\b",
        "social_agreement",
    ),
    (r"\b(you('re| are) (absolutely|completely|totally|entirely) right)\b", "social_agreement"),
    (r"\bthis is exactly (it|right|what)\b", "social_agreement"),
    (r"\bexactly this\b", "social_agreement"),
    (r"\bnailed it\b", "social_agreement"),
    (r"\byou nailed (it|this|the point)\b", "social_agreement"),
    (r"\bthis is such an important (point|reminder|thread|message)\b", "social_agreement"),
    (r"\bappreciate you (sharing|posting|saying) this\b", "social_agreement"),
    (r"\bthis needs to be said\b", "social_agreement"),
    (r"\bthis is the kind of (nuance|take|discussion) we need\b", "social_agreement"),
    (r"\b(couldn't (agree|have said it) (more|better))\b", "social_agreement"),
    (r"\bspot on\b", "social_agreement"),
    (r"\bwell (said|put|articulated|stated|expressed)\b", "social_agreement"),
    (r"\bvery well said\b", "social_agreement"),
    (r"\bthis deserves more attention\b", "social_agreement"),
    (r"\bmore people need to hear this\b", "social_agreement"),
    (r"\bthis should be pinned\b", "social_agreement"),
    (r"\bfor anyone wondering[,:\s]", "social_agreement"),
    (r"\bfor those asking[,:\s]", "social_agreement"),
    (r"\bquick breakdown[,:\s]", "social_agreement"),
    (r"\b100% (agree|correct|right|this|true)\b", "social_agreement"),
    (r"\b100 percent (agree|correct|right|true)\b", "social_agreement"),
    (r"\btotally agree (with this|here|on this|with you)\b", "social_agreement"),
    (r"\bstrongly agree\b", "social_agreement"),
    (r"\b(this (resonates|aligns) with)\b", "social_agreement"),
    (r"\b(to (your|the) point about)\b", "social_agreement"),
    (r"\bbuilding on (this|that|your point|what you('ve| have) said)\b", "social_agreement"),
    (
        r"\b(it's|it is) (also|equally|particularly) (worth|important) "
        r"(considering|noting|mentioning)\b",
        "social_agreement",
    ),
    # List/structure openers
    (
        r"\bhere('s| is|are) (a few|some|the|an overview|a breakdown|a list|a summary"
        r"|the key|the main)\b",
        "list_opener",
    ),
    (
        r"\bhere are (a few|some|the main|the key|several) (things|points|reasons|ideas|factors)\b",
        "list_opener",
    ),
    (r"\bin short[,:\s]", "list_opener"),
    (r"\blong story short[,:\s]", "list_opener"),
    (r"\bquick summary[,:\s]", "list_opener"),
    (r"\bbottom line[,:\s]", "list_opener"),
    (r"\bthe short answer is\b", "list_opener"),
    (
        r"\b(there are (several|many|a few|multiple|various|key|main)) "
        r"(ways?|reasons?|factors?|aspects?|benefits?|challenges?)\b",
        "list_opener",
    ),
    (
        r"\b(key (points?|aspects?|factors?|takeaways?|insights?|benefits?|features?|differences?)):?\s",
        "list_opener",
    ),
)

# ---------------------------------------------------------------------------
# High-signal subset, matched in addition to the base library
# ---------------------------------------------------------------------------

HIGH_SIGNAL_RULES: tuple[str, ...] = (
    r"\b(certainly|absolutely)\b",
    r"\bas an ai\b",
    r"\bgreat (question|point|observation)\b",
    r"\bthanks for (sharing|bringing this up)\b",
    r"\bi hope this helps\b",
    r"\bfeel free to\b",
    r"\b(furthermore|moreover|additionally)\b",
    r"\bin (conclusion|summary)\b",
    r"\b(firstly|secondly|thirdly)[,:\s]",
    r"\bhere's why\b",
    r"\b(comprehensive|holistic|leverag(e|ing))\b",
    r"\bdon't hesitate to\b",
    r"\b(delve|delving) into\b",
    r"\bwell (said|put)\b",
    r"\bnailed it\b",
    r"\bexactly this\b",
    r"\bfor anyone wondering[,:\s]",
    r"\b100% (agree|correct|right)\b",
    r"\btotally agree\b",
    r"\bspot on\b",
)

HIGH_SIGNAL_CATEGORY = "high_signal"

# ---------------------------------------------------------------------------
# List-structure markers (list-likeness feature)
# ---------------------------------------------------------------------------

LIST_MARKER_PATTERNS: tuple[str, ...] = (
    r"^\s*(\d+[.)]\s|\*\s|-\s|•\s)",
    r"\n\s*(\d+[.)]\s|\*\s|-\s)",
    r"(first(ly)?[,:]|second(ly)?[,:]|third(ly)?[,:]|finally[,:])",
)

# Structural punctuation counted by the punctuation-density feature
STRUCTURAL_PUNCTUATION = ",;:()–—"
EM_DASH = "—"
