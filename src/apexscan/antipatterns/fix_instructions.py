"""
Fix instructions.

Static guidance attached to every result of a given antipattern kind.
Written for a human or an LLM applying the fix.
"""

from apexscan.antipatterns.types import AntipatternType

GGD_FIX_INSTRUCTIONS = """
## Schema.getGlobalDescribe() Antipattern

### Problem
`Schema.getGlobalDescribe()` loads the describe of every SObject in the org.
Each call costs CPU time and heap; inside a loop the cost is paid on every
iteration and can breach governor limits.

### Fix
1. **Cache the result** once per transaction and reuse it:
   ```apex
   private static Map<String, Schema.SObjectType> globalDescribe;

   private static Map<String, Schema.SObjectType> getGlobalDescribe() {
       if (globalDescribe == null) {
           globalDescribe = Schema.getGlobalDescribe();
       }
       return globalDescribe;
   }
   ```
2. **Move calls out of loops**: fetch the map before the loop and look up
   each object name inside it.
3. **Prefer direct tokens** when the object is known at compile time:
   `Account.SObjectType.getDescribe()` or `Schema.getDescribe()` on a
   concrete type instead of a global lookup.
4. For a dynamic name, `Type.forName(name)` or
   `Schema.describeSObjects(new List<String>{ name })` describe only what
   is needed.
""".strip()

SOQL_NO_WHERE_LIMIT_FIX_INSTRUCTIONS = """
## SOQL Without WHERE or LIMIT Antipattern

### Problem
A query with neither a WHERE nor a LIMIT clause returns every row of the
object. As data grows it hits the 50,000 row limit, exhausts heap and slows
every transaction that runs it.

### Fix
1. **Filter** on what the code actually needs, preferring indexed fields:
   ```apex
   List<Account> accounts = [SELECT Id, Name FROM Account WHERE Status__c = 'Active'];
   ```
2. **Bound** the result when only a few rows are used:
   ```apex
   List<Contact> contacts = [SELECT Id, Email FROM Contact LIMIT 100];
   ```
3. The clauses must be on the **outer** query; a filtered sub-query does
   not bound the parent rows.
4. For genuine full scans use Batch Apex with `Database.QueryLocator`.
""".strip()

SOQL_UNUSED_FIELDS_FIX_INSTRUCTIONS = """
## SOQL Unused Fields Antipattern

### Problem
Fields selected but never read still cost query time, heap and view state.

### Fix
1. Remove the unused fields listed in each detection's metadata from the
   SELECT list. Keep `Id` and every field read later, including reads
   through loop variables, indexed access and bind expressions of later
   queries.
2. When `codeAfter` is provided it is a safe rewrite: only the outer SELECT
   list changed, everything from FROM onward is identical.
3. When `codeAfter` is empty the rewrite is not provably safe because the
   result is returned, stored in a class member, passed whole to other code
   (method argument, insert, dynamic `get`) or the query has sub-queries.
   Check the callers before removing fields by hand.
""".strip()

FIX_INSTRUCTIONS = {
    AntipatternType.GGD: GGD_FIX_INSTRUCTIONS,
    AntipatternType.SOQL_NO_WHERE_LIMIT: SOQL_NO_WHERE_LIMIT_FIX_INSTRUCTIONS,
    AntipatternType.SOQL_UNUSED_FIELDS: SOQL_UNUSED_FIELDS_FIX_INSTRUCTIONS,
}


def default_fix_instruction(antipattern_type: AntipatternType) -> str:
    """Instruction used by modules that have no recommender."""
    return f"{antipattern_type.value} antipattern detected. Manual review and fix recommended."
