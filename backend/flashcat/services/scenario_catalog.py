"""Conversation scenarios and their scripted keyword responses."""
from __future__ import annotations

from flashcat.models.conversation import (
    CannedResponse,
    CEFRLevel,
    KeywordResponse,
    Scenario,
    ScenarioScript,
    VocabularyItem,
)

FREE_CHAT_ID = "free-chat"


def _vocab(*pairs: tuple[str, str]) -> list[VocabularyItem]:
    return [VocabularyItem(catalan=ca, english=en) for ca, en in pairs]


def _kr(keywords: list[str], response: str, translation: str) -> KeywordResponse:
    return KeywordResponse(keywords=keywords, response=response, translation=translation)


def _fb(response: str, translation: str) -> CannedResponse:
    return CannedResponse(response=response, translation=translation)


SCENARIOS: list[Scenario] = [
    Scenario(
        id="restaurant-order",
        title="At the Restaurant",
        title_catalan="Al restaurant",
        description="Practice ordering food and drinks at a Catalan restaurant",
        level=CEFRLevel.A1,
        category="dining",
        starter_prompt="Bona tarda! Benvinguts al restaurant. Què voleu per beure?",
        starter_prompt_english="Good afternoon! Welcome to the restaurant. What would you like to drink?",
        suggested_responses=["Vull una aigua, si us plau.", "Una cervesa, si us plau.", "Té vi negre?"],
        key_vocabulary=_vocab(
            ("la carta", "the menu"),
            ("el compte", "the bill"),
            ("si us plau", "please"),
            ("gràcies", "thank you"),
        ),
    ),
    Scenario(
        id="market-shopping",
        title="At the Market",
        title_catalan="Al mercat",
        description="Buy fruits, vegetables and more at a local market",
        level=CEFRLevel.A1,
        category="shopping",
        starter_prompt="Bon dia! Què li poso avui?",
        starter_prompt_english="Good morning! What can I get for you today?",
        suggested_responses=[
            "Voldria mig quilo de tomàquets.",
            "Quant costen les taronges?",
            "Té pomes?",
        ],
        key_vocabulary=_vocab(
            ("un quilo", "one kilo"),
            ("quant costa?", "how much does it cost?"),
            ("fresc/fresca", "fresh"),
        ),
    ),
    Scenario(
        id="asking-directions",
        title="Asking for Directions",
        title_catalan="Demanar indicacions",
        description="Learn to ask for and understand directions",
        level=CEFRLevel.A2,
        category="travel",
        starter_prompt="Hola! Et puc ajudar? Sembla que estàs perdut.",
        starter_prompt_english="Hello! Can I help you? You seem lost.",
        suggested_responses=[
            "Sí, busco la plaça Catalunya.",
            "On és l'estació de metro més propera?",
            "Com puc arribar a la platja?",
        ],
        key_vocabulary=_vocab(
            ("gira a la dreta", "turn right"),
            ("gira a l'esquerra", "turn left"),
            ("tot recte", "straight ahead"),
            ("a prop", "nearby"),
        ),
    ),
    Scenario(
        id="hotel-checkin",
        title="Hotel Check-in",
        title_catalan="Registre a l'hotel",
        description="Check into a hotel and ask about amenities",
        level=CEFRLevel.A2,
        category="travel",
        starter_prompt="Benvingut a l'Hotel Barcelona! Té una reserva?",
        starter_prompt_english="Welcome to Hotel Barcelona! Do you have a reservation?",
        suggested_responses=[
            "Sí, tinc una reserva a nom de...",
            "Voldria una habitació doble.",
            "A quina hora és l'esmorzar?",
        ],
        key_vocabulary=_vocab(
            ("la clau", "the key"),
            ("l'habitació", "the room"),
            ("l'ascensor", "the elevator"),
        ),
    ),
    Scenario(
        id="making-friends",
        title="Making New Friends",
        title_catalan="Fer nous amics",
        description="Practice small talk and getting to know someone",
        level=CEFRLevel.A2,
        category="social",
        starter_prompt="Hola! Em dic Maria. D'on ets?",
        starter_prompt_english="Hello! My name is Maria. Where are you from?",
        suggested_responses=["Hola Maria! Sóc de...", "Encant de conèixer-te!", "Què fas a Barcelona?"],
        key_vocabulary=_vocab(
            ("encant de conèixer-te", "nice to meet you"),
            ("què tal?", "how are you?"),
            ("d'on ets?", "where are you from?"),
        ),
    ),
    Scenario(
        id="doctor-visit",
        title="At the Doctor's",
        title_catalan="A la consulta del metge",
        description="Describe symptoms and understand medical advice",
        level=CEFRLevel.B1,
        category="daily-life",
        starter_prompt="Bon dia. Què li passa? Com es troba?",
        starter_prompt_english="Good morning. What's wrong? How are you feeling?",
        suggested_responses=["Em fa mal el cap.", "Tinc febre des d'ahir.", "Em trobo marejat/da."],
        key_vocabulary=_vocab(
            ("em fa mal...", "my ... hurts"),
            ("tinc febre", "I have a fever"),
            ("la recepta", "the prescription"),
        ),
    ),
    Scenario(
        id="job-interview",
        title="Job Interview",
        title_catalan="Entrevista de feina",
        description="Practice answering common interview questions",
        level=CEFRLevel.B1,
        category="work",
        starter_prompt="Bon dia, sisplau, segui. Parli'm una mica de vostè.",
        starter_prompt_english="Good morning, please sit down. Tell me a bit about yourself.",
        suggested_responses=[
            "Tinc experiència en...",
            "He treballat durant cinc anys a...",
            "M'agradaria aprendre més sobre...",
        ],
        key_vocabulary=_vocab(
            ("l'experiència", "experience"),
            ("els estudis", "studies/education"),
            ("el sou", "salary"),
        ),
    ),
    Scenario(
        id=FREE_CHAT_ID,
        title="Free Conversation",
        title_catalan="Conversa lliure",
        description="Practice open-ended conversation on any topic",
        level=CEFRLevel.B2,
        category="social",
        starter_prompt="Hola! De què t'agradaria parlar avui?",
        starter_prompt_english="Hello! What would you like to talk about today?",
        suggested_responses=[
            "M'agradaria parlar sobre...",
            "Què opines de...?",
            "Podries explicar-me sobre...?",
        ],
        key_vocabulary=_vocab(
            ("opino que...", "I think that..."),
            ("estic d'acord", "I agree"),
            ("no estic d'acord", "I disagree"),
        ),
    ),
]

SCENARIOS_BY_ID: dict[str, Scenario] = {s.id: s for s in SCENARIOS}

_THANKS = ["gràcies", "gracies", "thanks"]
_GOODBYE = ["adéu", "adeu", "goodbye"]

SCRIPTS: dict[str, ScenarioScript] = {
    "restaurant-order": ScenarioScript(
        keyword_responses=[
            _kr(["aigua", "water"], "Perfecte, una aigua. Fresca o del temps?",
                "Perfect, a water. Cold or room temperature?"),
            _kr(["cervesa", "beer"], "Molt bé, una cervesa fresca. Tenim Estrella o Moritz.",
                "Very good, a cold beer. We have Estrella or Moritz."),
            _kr(["vi", "wine", "negre", "blanc"],
                "Tenim vi negre de la Rioja i blanc de Penedès. Quin preferiu?",
                "We have red wine from Rioja and white from Penedès. Which do you prefer?"),
            _kr(["refresc", "cola", "suc"], "Tenim Coca-Cola, Fanta i suc de taronja natural.",
                "We have Coca-Cola, Fanta and fresh orange juice."),
            _kr(["paella"],
                "La paella és excel·lent! És per a dues persones mínim. La volen amb marisc o mixta?",
                "The paella is excellent! It's for two people minimum. "
                "Would you like it with seafood or mixed?"),
            _kr(["peix", "fish"], "El peix del dia és lluç a la planxa amb patates. Molt recomanable!",
                "Today's fish is grilled hake with potatoes. Highly recommended!"),
            _kr(["carn", "meat", "bistec"], "Tenim bistec amb patates fregides o costelles a la brasa.",
                "We have steak with fries or grilled ribs."),
            _kr(["tapes", "tapas"],
                "Les tapes més populars són les patates braves, el pa amb tomàquet i les croquetes.",
                "The most popular tapas are patatas bravas, bread with tomato and croquettes."),
            _kr(["carta", "menu"], "Aquí té la carta. Avui recomanem el peix fresc i la paella.",
                "Here's the menu. Today we recommend the fresh fish and paella."),
            _kr(["compte", "bill", "pagar"], "El compte són 28 euros. Acceptem efectiu o targeta.",
                "The bill is 28 euros. We accept cash or card."),
            _kr(["targeta", "card"], "Sí, acceptem targeta. Aquí té el datàfon.",
                "Yes, we accept card. Here's the card reader."),
            _kr(_THANKS, "De res! Ha estat un plaer. Tornin aviat!",
                "You're welcome! It was a pleasure. Come back soon!"),
            _kr(_GOODBYE, "Adéu! Que vagi bé!", "Goodbye! Take care!"),
        ],
        fallback_responses=[
            _fb("Molt bé. I per menjar, què voleu? Avui tenim peix fresc i paella.",
                "Very good. And to eat, what would you like? Today we have fresh fish and paella."),
            _fb("Excel·lent elecció! Els hi porto de seguida. Volen res més?",
                "Excellent choice! I'll bring it right away. Would you like anything else?"),
            _fb("Perfecte! Alguna altra cosa?", "Perfect! Anything else?"),
        ],
    ),
    "market-shopping": ScenarioScript(
        keyword_responses=[
            _kr(["poma", "pomes", "apple"],
                "Les pomes són molt fresques, de Lleida! A 1,80 el quilo. Quantes en vol?",
                "The apples are very fresh, from Lleida! 1.80 per kilo. How many do you want?"),
            _kr(["taronja", "taronges", "orange"],
                "Les taronges són de València, molt dolces! A 2 euros el quilo.",
                "The oranges are from Valencia, very sweet! 2 euros per kilo."),
            _kr(["tomàquet", "tomaquet", "tomato"],
                "Els tomàquets són de l'hort, molt madurs! A 2,50 el quilo.",
                "The tomatoes are from the garden, very ripe! 2.50 per kilo."),
            _kr(["patata", "potato"], "Les patates són de Galícia, excel·lents! A 1 euro el quilo.",
                "The potatoes are from Galicia, excellent! 1 euro per kilo."),
            _kr(["quilo", "kilo", "mig"], "Cap problema! Aquí té. Res més?",
                "No problem! Here you go. Anything else?"),
            _kr(["quant costa", "quant costen", "preu", "price"],
                "Deixi'm mirar... Tot plegat són 5,50 euros.",
                "Let me see... All together it's 5.50 euros."),
            _kr(["fruita", "fruit"],
                "Tenim fruita molt bona avui: pomes, taronges, peres i préssecs.",
                "We have very good fruit today: apples, oranges, pears and peaches."),
            _kr(["verdura", "vegetable"],
                "Tenim tomàquets, enciams, cebes i patates, tot molt fresc!",
                "We have tomatoes, lettuce, onions and potatoes, all very fresh!"),
            _kr(["fresc", "fresh"], "Tot és del dia! Arriba cada matí de l'hort.",
                "Everything is fresh today! It arrives every morning from the garden."),
            _kr(_THANKS, "De res! Que vagi bé! Fins demà!",
                "You're welcome! Take care! See you tomorrow!"),
            _kr(_GOODBYE, "Adéu! Torni quan vulgui!", "Goodbye! Come back anytime!"),
        ],
        fallback_responses=[
            _fb("Què més li poso? Tinc fruita i verdura molt fresca avui.",
                "What else can I get you? I have very fresh fruit and vegetables today."),
            _fb("Miri, també tinc ofertes avui. Quina fruita li agrada?",
                "Look, I also have offers today. What fruit do you like?"),
            _fb("Molt bé! Alguna cosa més?", "Very good! Anything else?"),
        ],
    ),
    "asking-directions": ScenarioScript(
        keyword_responses=[
            _kr(["plaça catalunya", "placa catalunya"],
                "La plaça Catalunya és a 10 minuts. Segueix tot recte i després gira a l'esquerra.",
                "Plaça Catalunya is 10 minutes away. Go straight and then turn left."),
            _kr(["metro", "estació"],
                "L'estació de metro més propera és a 200 metres. Baixa per aquell carrer.",
                "The nearest metro station is 200 meters away. Go down that street."),
            _kr(["platja", "beach"],
                "La platja és a uns 20 minuts caminant. Pots agafar el metro línia 4.",
                "The beach is about 20 minutes walking. You can take metro line 4."),
            _kr(["sagrada familia", "sagrada"],
                "La Sagrada Família és una mica lluny. Millor agafa el metro línia 5.",
                "The Sagrada Família is a bit far. Better take metro line 5."),
            _kr(["on és", "on es", "where"],
                "Depèn d'on vols anar. Quin lloc busques exactament?",
                "It depends on where you want to go. What place are you looking for exactly?"),
            _kr(["com puc arribar", "how", "arrive"],
                "Pots anar caminant o amb transport públic. Què prefereixes?",
                "You can walk or take public transport. What do you prefer?"),
            _kr(["lluny", "far", "prop", "near"], "No és gaire lluny, uns 10 minuts caminant.",
                "It's not too far, about 10 minutes walking."),
            _kr(_THANKS, "De res! Bon viatge!", "You're welcome! Have a good trip!"),
        ],
        fallback_responses=[
            _fb("Cap on vols anar? Et puc ajudar a trobar el camí.",
                "Where do you want to go? I can help you find the way."),
            _fb("Segueix tot recte i pregunta si et perds, la gent és molt amable!",
                "Go straight and ask if you get lost, people are very friendly!"),
            _fb("Aquesta zona és fàcil de navegar. Tens el mòbil per mirar el mapa?",
                "This area is easy to navigate. Do you have your phone to check the map?"),
        ],
    ),
    "hotel-checkin": ScenarioScript(
        keyword_responses=[
            _kr(["reserva", "reservation", "booking"],
                "Deixi'm comprovar... Sí, aquí la tinc! Habitació 205, al segon pis.",
                "Let me check... Yes, here it is! Room 205, on the second floor."),
            _kr(["nom", "name"],
                "Perfecte, trobo la reserva. Necessito el seu passaport o DNI, si us plau.",
                "Perfect, I found the reservation. I need your passport or ID, please."),
            _kr(["habitació doble", "habitacio doble", "double"],
                "Tenim habitacions dobles amb vistes al mar o a la ciutat. Quina prefereix?",
                "We have double rooms with sea or city views. Which do you prefer?"),
            _kr(["esmorzar", "breakfast"],
                "L'esmorzar és de 7 a 10:30 al restaurant del primer pis. Inclou buffet complet!",
                "Breakfast is from 7 to 10:30 in the restaurant on the first floor. "
                "Includes full buffet!"),
            _kr(["wifi", "internet"], 'El WiFi és gratuït. La contrasenya és "hotelbarcelona2024".',
                'WiFi is free. The password is "hotelbarcelona2024".'),
            _kr(["clau", "key"], "Aquí té la clau de l'habitació. L'ascensor és per allà.",
                "Here's your room key. The elevator is that way."),
            _kr(["sortida", "checkout"],
                "La sortida és abans de les 12 del migdia. "
                "Pot deixar les maletes a recepció si vol.",
                "Checkout is before noon. You can leave your luggage at reception if you want."),
            _kr(_THANKS, "De res! Que gaudeixi de l'estada!", "You're welcome! Enjoy your stay!"),
        ],
        fallback_responses=[
            _fb("Necessita alguna cosa més? Estem aquí per ajudar-lo.",
                "Do you need anything else? We're here to help you."),
            _fb("Si té cap pregunta durant l'estada, truqui a recepció.",
                "If you have any questions during your stay, call reception."),
            _fb("Espero que gaudeixi de l'estada!", "I hope you enjoy your stay!"),
        ],
    ),
    "making-friends": ScenarioScript(
        keyword_responses=[
            _kr(["anglès", "angles", "english", "anglaterra", "uk"],
                "Ah, d'Anglaterra! M'encanta Londres. Has visitat Barcelona abans?",
                "Ah, from England! I love London. Have you visited Barcelona before?"),
            _kr(["estudis", "estudiar", "universitat", "study"],
                "Què estudies? Barcelona té molt bones universitats.",
                "What do you study? Barcelona has very good universities."),
            _kr(["feina", "treballar", "work"],
                "I de què treballes? Hi ha molta feina a Barcelona en tecnologia.",
                "And what do you work in? There's a lot of work in Barcelona in tech."),
            _kr(["futbol", "barça", "barcelona fc"],
                "Ets del Barça? Jo també! Has anat al Camp Nou?",
                "Are you a Barça fan? Me too! Have you been to Camp Nou?"),
            _kr(["cafè", "cafe", "coffee"], "Sí! Conec un cafè molt bonic al Born. Anem-hi!",
                "Yes! I know a very nice café in El Born. Let's go!"),
            _kr(["encantat", "nice to meet"],
                "Igualment! M'alegro de conèixer-te. D'on ets exactament?",
                "Likewise! I'm glad to meet you. Where exactly are you from?"),
            _kr(_THANKS, "De res! Ha estat un plaer parlar amb tu!",
                "You're welcome! It's been a pleasure talking with you!"),
        ],
        fallback_responses=[
            _fb("Què interessant! I què t'agrada fer en el teu temps lliure?",
                "How interesting! And what do you like to do in your free time?"),
            _fb("M'encanta conèixer gent nova. Barcelona és una ciutat molt internacional!",
                "I love meeting new people. Barcelona is a very international city!"),
            _fb("Hauríem de quedar algun dia per prendre alguna cosa!",
                "We should meet up someday for a drink!"),
        ],
    ),
    "doctor-visit": ScenarioScript(
        keyword_responses=[
            _kr(["cap", "head", "mal de cap"],
                "Mal de cap? Té febre també? Des de quan li fa mal?",
                "Headache? Do you have a fever too? Since when has it been hurting?"),
            _kr(["febre", "fever", "temperatura"],
                "Quanta febre té? Li prenc la temperatura ara mateix.",
                "How much fever do you have? I'll take your temperature right now."),
            _kr(["gola", "throat"], "Li fa mal la gola? Obri la boca, deixi'm veure.",
                "Does your throat hurt? Open your mouth, let me see."),
            _kr(["tos", "cough"],
                "Té tos seca o amb mucositat? Quants dies fa que té tos?",
                "Do you have a dry cough or with mucus? How many days have you had the cough?"),
            _kr(["ahir", "yesterday"], "Des d'ahir? Anem a veure què li passa exactament.",
                "Since yesterday? Let's see what's wrong exactly."),
            _kr(["recepta", "prescription"],
                "Aquí té la recepta. Pot recollir el medicament a qualsevol farmàcia.",
                "Here's the prescription. You can pick up the medication at any pharmacy."),
            _kr(_THANKS, "De res! Si no millora en 3 dies, torni a la consulta.",
                "You're welcome! If you don't improve in 3 days, come back to the office."),
        ],
        fallback_responses=[
            _fb("Entenc. Li faré un examen per veure què li passa.",
                "I understand. I'll do an examination to see what's wrong."),
            _fb("No es preocupi, sembla que no és greu. Però l'hem de tractar.",
                "Don't worry, it doesn't seem serious. But we need to treat it."),
            _fb("Necessito que em doni més detalls. Com es va començar a trobar malament?",
                "I need you to give me more details. How did you start feeling unwell?"),
        ],
    ),
    "job-interview": ScenarioScript(
        keyword_responses=[
            _kr(["experiència", "experiencia", "experience", "treballat"],
                "Molt bona experiència! Què va aprendre d'aquest lloc de feina?",
                "Very good experience! What did you learn from this job?"),
            _kr(["anys", "years"], "Impressionant! Sembla que té molta experiència en el sector.",
                "Impressive! It seems you have a lot of experience in the sector."),
            _kr(["idiomes", "languages", "anglès", "català"],
                "Els idiomes són molt importants per nosaltres. Quin nivell de català té?",
                "Languages are very important for us. What level of Catalan do you have?"),
            _kr(["equip", "team"],
                "Treballar en equip és fonamental aquí. Com descriuria el seu estil de treball?",
                "Teamwork is fundamental here. How would you describe your work style?"),
            _kr(["sou", "salari", "salary"],
                "El rang salarial per aquesta posició és competitiu. "
                "En parlarem si avancen les entrevistes.",
                "The salary range for this position is competitive. "
                "We'll discuss it if the interviews progress."),
            _kr(_THANKS,
                "Gràcies a vostè per venir. Li comunicarem la decisió la setmana vinent.",
                "Thank you for coming. We'll communicate the decision next week."),
        ],
        fallback_responses=[
            _fb("Molt interessant! Pot donar-me un exemple concret?",
                "Very interesting! Can you give me a concrete example?"),
            _fb("Entenc. I com creu que pot aportar valor al nostre equip?",
                "I understand. And how do you think you can add value to our team?"),
            _fb("Perfecte. Té alguna pregunta sobre les responsabilitats del lloc?",
                "Perfect. Do you have any questions about the job responsibilities?"),
        ],
    ),
    FREE_CHAT_ID: ScenarioScript(
        keyword_responses=[
            _kr(["temps", "weather", "plou", "sol"],
                "Sí, el temps a Barcelona sol ser molt bo! T'agrada el clima mediterrani?",
                "Yes, the weather in Barcelona is usually very good! "
                "Do you like the Mediterranean climate?"),
            _kr(["música", "musica", "music"],
                "M'encanta la música! Quin tipus de música t'agrada més?",
                "I love music! What type of music do you like best?"),
            _kr(["llibre", "book", "llegir"],
                "Llegir és una de les meves passions! Què estàs llegint ara?",
                "Reading is one of my passions! What are you reading now?"),
            _kr(["menjar", "food", "cuina"],
                "La cuina catalana és increïble! Has provat algun plat típic?",
                "Catalan cuisine is amazing! Have you tried any typical dish?"),
            _kr(["viatge", "travel", "viatjar"],
                "M'encanta viatjar! Quin és el millor lloc que has visitat?",
                "I love traveling! What's the best place you've visited?"),
            _kr(["català", "catalan", "catalunya"],
                "M'alegra que t'interessi el català! És una llengua molt rica.",
                "I'm glad you're interested in Catalan! It's a very rich language."),
            _kr(_THANKS, "De res! M'ha agradat molt parlar amb tu!",
                "You're welcome! I really enjoyed talking with you!"),
        ],
        fallback_responses=[
            _fb("Què interessant! Pots explicar-me més sobre això?",
                "How interesting! Can you tell me more about that?"),
            _fb("M'agrada el que dius. Quin és el teu punt de vista?",
                "I like what you're saying. What's your point of view?"),
            _fb("Continuem parlant! De què més t'agradaria parlar?",
                "Let's keep talking! What else would you like to talk about?"),
        ],
    ),
}


def script_for(scenario_id: str) -> ScenarioScript:
    return SCRIPTS.get(scenario_id, SCRIPTS[FREE_CHAT_ID])
