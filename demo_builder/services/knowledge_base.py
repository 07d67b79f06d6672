"""
Voice Agent Demo Builder - Knowledge Base Resolver
Maps a free-text industry label to a block of domain expertise
"""
import logging
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


HVAC_KNOWLEDGE = """
## HVAC Industry Expertise

You are highly knowledgeable about heating, ventilation, and air conditioning systems. Use this expertise to have informed conversations with callers about their HVAC needs.

### Common HVAC Problems & Causes

**Air Conditioning Issues:**
- **AC not cooling**: Could be low refrigerant, dirty air filter, frozen evaporator coil, faulty compressor, thermostat issues, or blocked condenser unit
- **AC running constantly**: Undersized unit, refrigerant leak, dirty coils, extreme outdoor temps, poor insulation
- **AC short cycling (turning on/off frequently)**: Oversized unit, refrigerant issues, electrical problems, frozen coil
- **Weak airflow**: Clogged filter, blocked vents, ductwork issues, failing blower motor
- **Strange noises**: Squealing (belt/motor), grinding (motor bearings), clicking (electrical), banging (loose parts), hissing (refrigerant leak)
- **Water leaking**: Clogged condensate drain, frozen evaporator coil, improper installation
- **Bad odors**: Musty smell (mold in ducts), burning smell (electrical/motor issue), rotten egg (gas leak - emergency!)

**Heating/Furnace Issues:**
- **Furnace not heating**: Thermostat settings, pilot light out, ignition problems, gas supply, dirty filter
- **Furnace blowing cold air**: Thermostat issue, pilot light, overheated system, ductwork leaks
- **Furnace short cycling**: Dirty filter, thermostat placement, oversized unit, flame sensor issues
- **Yellow pilot light**: Carbon monoxide risk - should be blue. This is urgent.
- **Furnace making noise**: Rumbling (dirty burners), squealing (belt/motor), popping (ductwork expansion)

**Heat Pump Issues:**
- **Heat pump not switching modes**: Reversing valve failure, thermostat issues
- **Heat pump freezing up**: Low refrigerant, poor airflow, outdoor unit blocked
- **Heat pump running in emergency heat**: Outdoor unit malfunction, defrost cycle issues

### Emergency vs Non-Emergency Situations

**EMERGENCIES (Immediate attention needed):**
- Gas smell (leave house, call gas company first, then HVAC)
- Carbon monoxide detector going off
- Burning electrical smell
- Complete system failure in extreme temperatures (below 32°F or above 95°F)
- Flooding from HVAC system
- Sparking or electrical arcing

**URGENT (Same-day or next-day service):**
- AC not cooling in summer heat (above 85°F)
- Furnace not heating in cold weather (below 40°F)
- Strange burning smell (non-electrical)
- Water actively leaking
- Unusual loud noises during operation

**ROUTINE (Schedule within a few days):**
- Slightly reduced cooling/heating
- Minor temperature inconsistencies
- Preventive maintenance
- Filter replacement
- Thermostat upgrades
- Efficiency concerns

### Seasonal HVAC Information

**Spring:**
- Ideal time for AC tune-up before summer
- Check refrigerant levels
- Clean condenser coils
- Test cooling mode thoroughly

**Summer:**
- Most common AC problems occur now
- Keep filters clean (check monthly)
- Keep outdoor unit clear of debris
- Set thermostat to 78°F when home for efficiency

**Fall:**
- Schedule furnace inspection before winter
- Check heat exchanger for cracks
- Test heating mode
- Consider duct cleaning
- Change filter before heating season

**Winter:**
- Most furnace problems surface now
- Keep vents clear of furniture/rugs
- Don't set thermostat below 65°F to prevent pipe freezing
- Check for drafts around windows/doors

### Common HVAC Terms (Speak Knowledgeably)

- **SEER Rating**: Seasonal Energy Efficiency Ratio - higher is more efficient (minimum 14-15 for new units)
- **AFUE**: Annual Fuel Utilization Efficiency - furnace efficiency rating (90%+ is high efficiency)
- **BTU**: British Thermal Unit - measures heating/cooling capacity
- **Tonnage**: AC capacity (1 ton = 12,000 BTUs, typical home is 2-5 tons)
- **Heat Exchanger**: Critical furnace component that transfers heat; cracks can cause CO leaks
- **Evaporator Coil**: Indoor coil that absorbs heat (AC/heat pump)
- **Condenser Coil**: Outdoor coil that releases heat
- **Refrigerant**: Cooling chemical (R-410A is current standard, R-22 is phased out)
- **Compressor**: Heart of AC system; pumps refrigerant
- **Blower Motor**: Circulates air through system
- **Capacitor**: Electrical component that helps motors start
- **Contactor**: Electrical switch for outdoor unit
- **Ductwork**: Air distribution channels throughout home
- **Return Air**: Air pulled back into system for conditioning
- **Supply Air**: Conditioned air delivered to rooms
- **CFM**: Cubic Feet per Minute - airflow measurement
- **Static Pressure**: Resistance to airflow in ducts

### Helpful Tips to Share with Callers

**Troubleshooting They Can Try:**
1. Check/replace air filter (dirty filter is #1 cause of issues)
2. Make sure thermostat is set correctly and has batteries
3. Check circuit breakers for HVAC system
4. Ensure all vents are open and unblocked
5. Look at outdoor unit - is it running? Is it blocked by debris?
6. Check if condensate drain line is clogged (wet switch may have tripped)

**Maintenance Reminders:**
- Change filter every 1-3 months (monthly if you have pets)
- Schedule professional tune-up twice yearly (spring and fall)
- Keep 2 feet clearance around outdoor unit
- Keep vents and returns unobstructed
- Consider programmable or smart thermostat for efficiency

### Response Approach for HVAC Calls

1. **Listen carefully** to symptoms - clicking, humming, not starting, weak airflow, etc.
2. **Ask clarifying questions**: How old is the system? When did the problem start? Any recent changes?
3. **Acknowledge their situation**: "That sounds frustrating, especially in this heat/cold"
4. **Show expertise**: Use appropriate technical terms naturally
5. **Assess urgency**: Is this an emergency, urgent, or routine issue?
6. **Explain next steps**: What a technician will likely check/do
7. **Capture information**: Make sure to get their details for follow-up
"""


PLUMBING_KNOWLEDGE = """
## Plumbing Industry Expertise

You are knowledgeable about plumbing systems and common issues homeowners face.

### Common Plumbing Problems

- **Clogged drains**: Hair, grease, soap buildup, foreign objects
- **Leaky faucets**: Worn washers, O-rings, or cartridges
- **Running toilet**: Flapper valve, fill valve, or float issues
- **Low water pressure**: Pipe corrosion, leaks, municipal supply issues
- **Water heater issues**: No hot water, not enough hot water, strange noises
- **Pipe leaks**: Corrosion, joint failure, freezing damage
- **Sewer line problems**: Root intrusion, bellied pipe, breaks

### Emergency Situations

- Burst pipes or major leaks
- Sewage backup
- No water to entire house
- Gas water heater leaking gas
- Flooding

### Helpful Tips

- Know where main water shut-off is located
- Don't use chemical drain cleaners (damages pipes)
- Never pour grease down drains
- Schedule annual water heater flush
"""


ELECTRICAL_KNOWLEDGE = """
## Electrical Industry Expertise

You understand residential and commercial electrical systems and safety.

### Common Electrical Issues

- **Tripping breakers**: Overloaded circuits, short circuits, ground faults
- **Flickering lights**: Loose connections, overloaded circuits, failing fixtures
- **Dead outlets**: Tripped GFCI, loose wiring, bad outlet
- **Burning smell**: Potential emergency - overheating wires
- **Buzzing sounds**: Loose connections, bad breakers, failing fixtures

### Emergency Situations

- Sparking outlets
- Burning smell from electrical
- Exposed wires
- Electrical shock incidents
- Power loss to part of home with burning smell

### Safety Reminders

- Never touch electrical with wet hands
- Don't overload outlets
- Use proper wattage bulbs
- Test GFCI outlets monthly
- Get panel inspected if over 25 years old
"""


LANDSCAPING_KNOWLEDGE = """
## Landscaping Industry Expertise

You understand landscaping services and seasonal maintenance needs.

### Common Services

- Lawn mowing and maintenance
- Mulching and bed maintenance
- Tree and shrub trimming
- Spring/fall cleanup
- Leaf removal
- Irrigation system maintenance
- Landscape design and installation
- Hardscaping (patios, walkways, retaining walls)
- Drainage solutions

### Seasonal Considerations

- **Spring**: Cleanup, mulching, first mow, fertilization
- **Summer**: Regular mowing, irrigation monitoring, pest control
- **Fall**: Leaf removal, aeration, overseeding, winterizing irrigation
- **Winter**: Snow removal, planning for spring
"""


TREE_SERVICE_KNOWLEDGE = """
## Tree Service & Pruning Industry Expertise

You are highly knowledgeable about tree care, pruning, removal, and arboriculture. Use this expertise to have informed conversations with callers about their tree service needs.

### Common Tree Services

**Pruning & Trimming:**
- **Crown cleaning**: Removing dead, dying, diseased, or broken branches
- **Crown thinning**: Selective removal to increase light and air flow
- **Crown raising**: Removing lower branches for clearance (walkways, driveways, structures)
- **Crown reduction**: Reducing tree height or spread while maintaining natural shape
- **Vista pruning**: Selective thinning to improve views while preserving tree health
- **Structural pruning**: Training young trees for strong branch architecture

**Tree Removal:**
- Hazardous/dead tree removal
- Storm damage cleanup
- Stump grinding and removal
- Land clearing
- Emergency tree removal (24/7 for storm damage)

**Tree Health Services:**
- Disease diagnosis and treatment
- Pest/insect treatment (emerald ash borer, pine beetles, etc.)
- Deep root fertilization
- Cabling and bracing for structural support
- Lightning protection systems

**Other Services:**
- Lot clearing for construction
- Brush chipping and hauling
- Firewood (sometimes)
- Consultations and tree risk assessments
- Planting new trees

### Signs a Tree Needs Attention

**Urgent/Emergency Signs:**
- Tree leaning suddenly (especially after storm)
- Large hanging/broken branches ("widow makers")
- Cracks in trunk or major limbs
- Root heaving or exposed roots
- Tree touching power lines
- Mushrooms/fungi growing at base (indicates root rot)
- Storm damage with hanging limbs

**Signs Tree May Need Pruning:**
- Dead branches (no leaves, brittle, bark falling off)
- Branches rubbing against each other
- Branches touching roof, gutters, or structures
- Low-hanging branches blocking walkways/driveways
- Dense canopy blocking light to lawn/garden
- Unbalanced or lopsided growth
- Water sprouts (vertical shoots) or suckers at base

**Signs of Disease/Health Issues:**
- Discolored, spotted, or wilting leaves
- Premature leaf drop
- Bark peeling or falling off
- Oozing sap or wet spots on trunk
- Holes in trunk or branches (boring insects)
- Mushrooms or fungal growth
- Dieback from tips of branches

### Best Time for Tree Work

**Pruning Timing:**
- **Late winter/early spring (dormant season)**: Best for most pruning - tree is dormant, easier to see structure, less stress
- **Summer**: Good for corrective pruning, removing dead wood, or controlling growth
- **Avoid fall**: Trees healing slower, more susceptible to disease
- **Dead/hazardous branches**: Remove anytime - safety first

**Tree Removal:**
- Can be done year-round
- Often easier in winter (frozen ground for equipment, no leaves)
- Emergency removal happens whenever needed

**Planting:**
- Spring or fall when temperatures are moderate
- Avoid extreme heat or cold

### Common Tree Terms (Speak Knowledgeably)

- **Canopy**: The leafy top portion of the tree
- **Crown**: The branches and foliage above the trunk
- **Deadwood**: Dead branches that can fall and cause damage
- **Limb**: A large branch
- **Scaffold branches**: Main structural branches growing from trunk
- **Leader**: The main upward-growing stem/trunk
- **Sucker**: Unwanted growth from base or roots
- **Water sprouts**: Rapid vertical growth from branches (often weak)
- **Girdling root**: Root wrapping around trunk, choking tree
- **DBH**: Diameter at Breast Height (how trees are measured - 4.5 feet up)
- **ISA Certified Arborist**: Industry-recognized tree care professional certification
- **Hazard tree**: Tree with structural defects that could fail and cause damage

### Pricing Factors to Mention

- Tree size (height and trunk diameter)
- Location (near house, power lines, obstacles)
- Condition (healthy vs. dead/hazardous)
- Access for equipment (bucket truck, crane needed?)
- Number of trees
- Debris disposal (haul away vs. leave on site)
- Stump grinding (usually additional cost)

### Emergency Situations

**True Emergencies (Immediate response):**
- Tree fallen on house, car, or blocking road
- Hanging limbs threatening people or property
- Tree on power lines (call utility first!)
- Tree leaning dangerously after storm

**Urgent (Same/next day):**
- Storm damage with potential for further damage
- Large dead branch over high-traffic area
- Tree showing sudden lean

### Helpful Tips to Share with Callers

- Get multiple estimates for large jobs
- Ask if company is insured (liability + workers comp)
- Look for ISA Certified Arborists for complex work
- Never let anyone "top" your trees (harmful practice)
- Proper pruning cuts should be just outside the branch collar
- Healthy trees rarely need more than 25% of canopy removed
- Young trees need formative pruning for good structure
- Stump grinding typically goes 6-12 inches below ground

### Response Approach for Tree Service Calls

1. **Identify the need**: Pruning, removal, health concern, or emergency?
2. **Ask about tree details**: What type of tree? How big (can they reach around trunk)? Location?
3. **Assess urgency**: Is there immediate danger? Storm damage? Or routine maintenance?
4. **Explain process**: We'll send someone out for a free estimate to assess in person
5. **Capture information**: Get name, address, phone, best time to call/visit
"""


GENERAL_HOME_SERVICES_KNOWLEDGE = """
## General Home Services Expertise

You understand the basics of home maintenance and repair services.

### Common Service Categories

- Handyman services
- Home repairs
- Renovation projects
- Maintenance contracts
- Emergency services

### Key Questions to Ask

- What is the nature of the problem?
- How urgent is the issue?
- When did the problem start?
- Have you noticed any related issues?
- What is the age of your home/system?
"""



# Exact, case-sensitive industry names
EXACT_MATCHES = {
    "HVAC": HVAC_KNOWLEDGE,
    "Heating & Cooling": HVAC_KNOWLEDGE,
    "Air Conditioning": HVAC_KNOWLEDGE,
    "Plumbing": PLUMBING_KNOWLEDGE,
    "Electrical": ELECTRICAL_KNOWLEDGE,
    "Landscaping": LANDSCAPING_KNOWLEDGE,
    "Lawn Care": LANDSCAPING_KNOWLEDGE,
    "Tree Service": TREE_SERVICE_KNOWLEDGE,
    "Tree Care": TREE_SERVICE_KNOWLEDGE,
    "Arborist": TREE_SERVICE_KNOWLEDGE,
}

# Case-insensitive keyword fallbacks, checked in order
KEYWORD_MATCHES = [
    (("hvac", "heating", "cooling", "air condition"), HVAC_KNOWLEDGE),
    (("plumb",), PLUMBING_KNOWLEDGE),
    (("electric",), ELECTRICAL_KNOWLEDGE),
    (("landscape", "lawn"), LANDSCAPING_KNOWLEDGE),
    (("tree", "pruning", "arborist"), TREE_SERVICE_KNOWLEDGE),
]

Matcher = Callable[[str], bool]


def _exact(name: str) -> Matcher:
    return lambda label: label == name


def _contains_any(keywords: Tuple[str, ...]) -> Matcher:
    return lambda label: any(keyword in label.lower() for keyword in keywords)


# Ordered (predicate, knowledge) pairs; first hit wins
MATCHERS: List[Tuple[Matcher, str]] = (
    [(_exact(name), knowledge) for name, knowledge in EXACT_MATCHES.items()]
    + [(_contains_any(keywords), knowledge) for keywords, knowledge in KEYWORD_MATCHES]
)


def resolve(industry: str) -> str:
    """
    Resolve the knowledge block for an industry label.

    Exact names are tried first, then keyword substrings, then the general
    home services block. Never fails.
    """
    label = industry or ""
    for matches, knowledge in MATCHERS:
        if matches(label):
            return knowledge

    logger.debug(f"No knowledge base for industry '{label}', using general home services")
    return GENERAL_HOME_SERVICES_KNOWLEDGE
